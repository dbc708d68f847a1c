# -*- coding: utf-8 -*-
#
# codedoc documentation build configuration file
import os
import sys

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))
sys.path.insert(0, os.path.join(ROOT_DIR, 'src'))

from codedoc import Body, FileBuf, new_documentation, scan_file, write_rst

# CODEDOC_SOURCES overrides the example sources documented below
SOURCES = os.getenv('CODEDOC_SOURCES', '').split()

def extract_docs(infiles, outfile, title):
    doc, body = new_documentation(), Body()
    for infile in infiles:
        scan_file(FileBuf.open(infile), doc, body=body)
    with open(outfile, 'w', encoding='utf-8') as f:
        write_rst(f, doc, title=title, body=body.text)

# Generate the documentation source files
if SOURCES:
    extract_docs(SOURCES, 'api.rst', 'API Reference')
else:
    for m in ['body', 'function', 'namespace', 'type']:
        extract_docs([os.path.join(ROOT_DIR, 'src', 'data', 'testfiles', m + '.cxx')],
                     '%s.rst' % m, '%s Example' % m.title())

# -- General configuration ------------------------------------------------

# Add any Sphinx extension module names here, as strings. They can be
# extensions coming with Sphinx (named 'sphinx.ext.*') or your custom
# ones.
extensions = ['sphinx.ext.ifconfig',
    'sphinx.ext.githubpages']

# The suffix(es) of source filenames.
source_suffix = '.rst'

# The master toctree document.
master_doc = 'index'

# General information about the project.
project = u'codedoc'
copyright = u'2024, codedoc developers'
author = u'codedoc developers'

# The short X.Y version.
from codedoc import __version__ as version
# The full version, including alpha/beta/rc tags.
release = version

# List of patterns, relative to source directory, that match files and
# directories to ignore when looking for source files.
exclude_patterns = []

# The name of the Pygments (syntax highlighting) style to use.
pygments_style = 'sphinx'

# If true, `todo` and `todoList` produce output, else they produce nothing.
todo_include_todos = False


# -- Options for HTML output ----------------------------------------------

# The theme to use for HTML and HTML Help pages.  See the documentation for
# a list of builtin themes.
#
html_theme = 'sphinx_rtd_theme'


# -- Options for HTMLHelp output ------------------------------------------

# Output file base name for HTML help builder.
htmlhelp_basename = '%sdoc' % project


# -- Options for manual page output ---------------------------------------

# One entry per manual page. List of tuples
# (source start file, name, description, authors, manual section).
man_pages = [
    (master_doc, project, u'%s Documentation' % project,
     [author], 1)
]
