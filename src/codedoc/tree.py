""" Documentation tree: element kinds, sorted insertion and XML persistence """
import re

from lxml import etree

from codedoc import comment

# Element kinds
ARGUMENT = 'argument'
CLASS = 'class'
CODEDOC = 'codedoc'
CONSTANT = 'constant'
DESCRIPTION = 'description'
ENUMERATION = 'enumeration'
FUNCTION = 'function'
NAMESPACE = 'namespace'
RETURNVALUE = 'returnvalue'
STRUCT = 'struct'
TYPE = 'type'
TYPEDEF = 'typedef'
UNION = 'union'
VARIABLE = 'variable'

ELEMENTS = frozenset([ARGUMENT, CLASS, CODEDOC, CONSTANT, DESCRIPTION,
                      ENUMERATION, FUNCTION, NAMESPACE, RETURNVALUE, STRUCT,
                      TYPE, TYPEDEF, UNION, VARIABLE])

STRUCTURES = (CLASS, STRUCT, UNION)


class MissingNodeError(ValueError):
    """A well-formed XML file without a <codedoc> node"""


# XML 1.0 can't carry most C0 controls; VT/FF are line movers in source
_XML_UNSAFE_RE = re.compile('[\x00-\x08\x0e-\x1f\ufffe\uffff]')


def xml_safe(text):
    return _XML_UNSAFE_RE.sub('', text.replace('\v', '\n').replace('\f', '\n'))


def new_element(kind, parent=None, name=None):
    assert kind in ELEMENTS, f'Unknown element kind "{kind}"'
    node = etree.Element(kind) if parent is None else etree.SubElement(parent, kind)
    if name is not None:
        node.set('name', xml_safe(name))
    return node


def new_documentation():
    """Create an empty documentation tree, returning its <codedoc> node"""
    return new_element(CODEDOC)


def delete(node):
    """Remove node (and its subtree) from its parent, if it has one"""
    if node is not None:
        parent = node.getparent()
        if parent is not None:
            parent.remove(node)


def find_child(tree, kind, name=None):
    """Find the first direct child of tree of the given kind (and name)"""
    for child in tree:
        if child.tag == kind and (name is None or child.get('name') == name):
            return child
    return None


def _replace_existing(tree, node, name):
    existing = find_child(tree, node.tag, name)
    if existing is not None:
        # A redeclaration keeps any visibility recorded earlier
        scope = existing.get('scope')
        if scope is not None and node.get('scope') is None:
            node.set('scope', scope)
        tree.remove(existing)


def _insertable(tree, node):
    if tree is None or node is None or node.getparent() is tree:
        return None
    name = node.get('name')
    if not name or name.startswith('_'):
        return None # Unnamed, or private by naming convention
    return name


def sort_node(tree, node):
    """Insert node into tree in name order, replacing any same-kind node of the same name"""
    name = _insertable(tree, node)
    if name is None:
        return
    _replace_existing(tree, node, name)
    for child in tree:
        child_name = child.get('name')
        if child_name is not None and name < child_name:
            child.addprevious(node)
            return
    tree.append(node)


def append_node(tree, node):
    """Like sort_node() but keeps declaration order (enumeration constants)"""
    name = _insertable(tree, node)
    if name is not None:
        _replace_existing(tree, node, name)
        tree.append(node)


def get_description(node):
    """Return the description text of node, or None if it has none"""
    description = find_child(node, DESCRIPTION)
    if description is None:
        return None
    return description.text or ''


def set_description(node, text):
    """Set the description of node, replacing any existing one"""
    for description in node.findall(DESCRIPTION):
        node.remove(description)
    description = new_element(DESCRIPTION)
    description.text = xml_safe(text)
    node.insert(0, description)
    return description


def join_tokens(tokens):
    """Join (whitespace, text) type tokens into a single string"""
    parts = []
    for whitespace, text in tokens:
        if whitespace and parts:
            parts.append(' ')
        parts.append(text)
    return ''.join(parts)


def add_type(node, tokens):
    """Add a <type> child holding the joined tokens"""
    type_node = new_element(TYPE, node)
    type_node.text = xml_safe(join_tokens(tokens))
    return type_node


def get_type(node):
    type_node = find_child(node, TYPE)
    if type_node is None:
        return None
    return type_node.text or ''


def find_public(node, kind, name=None, mode=None):
    """Yield the direct children of node of the given kind that are documented for mode"""
    for child in node:
        if child.tag != kind or (name is not None and child.get('name') != name):
            continue
        # A missing description signals a private node
        text = get_description(child)
        if text is None or comment.is_private(text):
            continue
        if comment.is_excluded(text, mode):
            continue
        yield child


def save_documentation(doc, filename):
    """Write the tree containing doc to filename (raises OSError)"""
    root = doc.getroottree()
    with open(filename, 'wb') as f:
        root.write(f, encoding='utf-8', xml_declaration=True, pretty_print=True)


def load_documentation(filename):
    """Load a documentation file, returning its <codedoc> node.

    Raises OSError if the file can't be read, and ValueError if it isn't
    a documentation file.
    """
    parser = etree.XMLParser(remove_blank_text=True, remove_comments=True)
    try:
        root = etree.parse(filename, parser).getroot()
    except etree.XMLSyntaxError as e:
        raise ValueError(str(e))
    if root.tag == CODEDOC:
        return root
    doc = root.find('.//' + CODEDOC)
    if doc is None:
        raise MissingNodeError('missing the <codedoc> node')
    return doc
