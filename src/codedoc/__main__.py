""" codedoc command line: scan C/C++ sources into a documentation tree and write rst """
import argparse
import logging
import sys
from os.path import isfile

from codedoc import __version__
from codedoc.body import Body
from codedoc.filebuf import FileBuf
from codedoc.rst import DEFAULT_TITLE, write_rst
from codedoc.scanner import scan_file
from codedoc.tree import (MissingNodeError, load_documentation, new_documentation,
                          save_documentation)

log = logging.getLogger('codedoc')

DEFAULT_AUTHOR = 'Unknown'
DEFAULT_COPYRIGHT = 'Unknown'
DEFAULT_VERSION = '0.0'


def _msg(s):
    print(s, file=sys.stderr)


def get_parser():
    parser = argparse.ArgumentParser(
        prog='codedoc',
        usage='codedoc [options] [filename.xml] [source files] >filename.rst',
        description='Generate reStructuredText documentation from C and C++ source files.')
    parser.add_argument('files', nargs='*', metavar='file',
                        help='XML documentation file and/or C/C++ source files')
    parser.add_argument('--author', help='Set author name')
    parser.add_argument('--body', metavar='filename', help='Set body file (markdown supported)')
    parser.add_argument('--copyright', help='Set copyright text')
    parser.add_argument('--docversion', metavar='version', help='Set documentation version')
    parser.add_argument('--no-output', action='store_true',
                        help='Do not generate documentation file')
    parser.add_argument('--output', '-o', metavar='filename',
                        help='Write the documentation to filename instead of stdout')
    parser.add_argument('--section', help='Set section name')
    parser.add_argument('--title', help='Set documentation title')
    parser.add_argument('--debug', action='store_true', help='Trace the scanner to stderr')
    parser.add_argument('--version', action='version', version=__version__,
                        help='Show codedoc version')
    return parser


def load_xml(filename):
    """Load a saved documentation tree, or return a new one"""
    if not isfile(filename):
        return new_documentation()
    try:
        return load_documentation(filename)
    except MissingNodeError:
        _msg('codedoc: XML documentation file "%s" is missing the <codedoc> node.' % filename)
    except (OSError, ValueError):
        _msg('codedoc: Unable to read the XML documentation file "%s".' % filename)
    return new_documentation()


def main(argv=None):
    args = get_parser().parse_args(argv)
    if args.debug:
        logging.basicConfig(level=logging.DEBUG, format='%(name)s: %(message)s')

    xmlfile = None
    sources = []
    for filename in args.files:
        if len(filename) > 4 and filename.endswith('.xml'):
            if xmlfile:
                get_parser().error('only one XML documentation file may be given')
            xmlfile = filename
        else:
            sources.append(filename)

    body = Body()
    if args.body:
        try:
            body = Body.load(args.body)
        except OSError as e:
            _msg('codedoc: %s: %s' % (args.body, e.strerror))
            return 1

    doc = load_xml(xmlfile) if xmlfile else new_documentation()

    for filename in sources:
        try:
            file = FileBuf.open(filename)
        except OSError as e:
            _msg('codedoc: %s: %s' % (filename, e.strerror))
            return 1
        log.debug('scanning %s', filename)
        scan_file(file, doc, body=body)

    if sources and xmlfile:
        try:
            save_documentation(doc, xmlfile)
        except OSError as e:
            _msg('codedoc: Unable to write the XML documentation file "%s": %s' %
                 (xmlfile, e.strerror or e))
            return 1

    if args.no_output:
        return 0

    metadata = {
        'title': args.title or body.get_metadata('title', DEFAULT_TITLE),
        'author': args.author or body.get_metadata('author', DEFAULT_AUTHOR),
        'copyright': args.copyright or body.get_metadata('copyright', DEFAULT_COPYRIGHT),
        'version': args.docversion or body.get_metadata('version', DEFAULT_VERSION),
        'section': args.section,
    }
    if args.output:
        try:
            with open(args.output, 'w', encoding='utf-8') as f:
                write_rst(f, doc, body=body.text, **metadata)
        except OSError as e:
            _msg('codedoc: %s: %s' % (args.output, e.strerror))
            return 1
    else:
        write_rst(sys.stdout, doc, body=body.text, **metadata)
    return 0


if __name__ == '__main__':
    sys.exit(main())
