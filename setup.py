"""setuptools config for codedoc """
from setuptools import setup
import os, re, sys

def _msg(s):
    print(s + '\n', file=sys.stderr)

ABS_PATH = os.path.dirname(os.path.abspath(__file__)) + '/'

def _get_version():
    with open(ABS_PATH + 'src/codedoc/__init__.py', encoding='utf-8') as f:
        m = re.search(r"^__version__ = '([^']+)'", f.read(), re.M)
    if m is None:
        _msg('Error: unable to find __version__ in src/codedoc/__init__.py')
        sys.exit(1)
    return m.group(1)

if sys.version_info < (3, 7):
    _msg('Error: codedoc requires Python 3.7 or later.')
    sys.exit(1)

kwargs = {
    'name': 'codedoc',
    'version': _get_version(),
    'description': 'C/C++ source documentation generator',
    'long_description': 'Scans C and C++ source files for declarations and their comments '
                        'and generates reStructuredText documentation for Sphinx',
    'url': 'https://www.msweet.org/codedoc',
    'author': 'codedoc developers',
    'license': 'Apache-2.0',
    'zip_safe': False,
    'classifiers': [
        'Development Status :: 5 - Production/Stable',
        'Intended Audience :: Developers',
        'Topic :: Software Development :: Documentation',
        'License :: OSI Approved :: Apache Software License',
        'Programming Language :: C',
        'Programming Language :: C++',
        'Programming Language :: Python :: 3',
    ],
    'keywords': 'C C++ documentation generator reStructuredText Sphinx',
    'project_urls': {
        'Documentation': 'https://www.msweet.org/codedoc',
        'Tracker': 'https://github.com/michaelrsweet/codedoc/issues',
    },
    'python_requires': '>=3.7',
    'install_requires': ['lxml'],
    'extras_require': {
        'docs': ['sphinx', 'sphinx_rtd_theme'],
    },
    'packages': ['codedoc'],
    'package_dir': {'': 'src'},
    'entry_points': {
        'console_scripts': ['codedoc = codedoc.__main__:main'],
    },
}
setup(**kwargs)
