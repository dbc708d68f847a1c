from os.path import isfile

from codedoc.body import Body
from codedoc.filebuf import FileBuf
from codedoc.scanner import scan_file
from codedoc.tree import (ARGUMENT, CLASS, CODEDOC, CONSTANT, DESCRIPTION, ENUMERATION, FUNCTION,
                          NAMESPACE, RETURNVALUE, STRUCT, TYPE, TYPEDEF, UNION, VARIABLE,
                          find_child, get_description, get_type, new_documentation)

# Allow to run from any sub dir
for depth in [0, 1, 2]:
    root_dir = '../' * depth
    if isfile(root_dir + 'src/data/testfiles/function.cxx'):
        break

TESTFILES = root_dir + 'src/data/testfiles/'


def fixture_path(name):
    return TESTFILES + name


def scan_string(text, body=None, doc=None):
    """Scan C/C++ source text, returning the documentation tree"""
    doc = new_documentation() if doc is None else doc
    scan_file(FileBuf('<test>', text.encode('utf-8')), doc, body=body)
    return doc


def scan_fixture(name, body=None, doc=None):
    doc = new_documentation() if doc is None else doc
    scan_file(FileBuf.open(fixture_path(name)), doc, body=body)
    return doc


def read_all(text):
    """Decode text through a FileBuf, returning every character read"""
    f, chars = FileBuf('<test>', text.encode('utf-8') if isinstance(text, str) else text), []
    while True:
        ch = f.getc()
        if not ch:
            return ''.join(chars)
        chars.append(ch)


def names(node, kind):
    return [child.get('name') for child in node if child.tag == kind]


def child(node, kind, name):
    found = find_child(node, kind, name)
    assert found is not None, '%s "%s" not found' % (kind, name)
    return found
