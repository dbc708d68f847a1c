""" Write a documentation tree as reStructuredText for Sphinx's C/C++ domains """
import re

from codedoc import comment
from codedoc.tree import (ARGUMENT, CLASS, CONSTANT, ENUMERATION, FUNCTION, NAMESPACE,
                          RETURNVALUE, STRUCT, TYPEDEF, UNION, VARIABLE, find_child,
                          find_public, get_description, get_type)

DEFAULT_TITLE = 'Documentation'

DIRECTIONS = {'I': '[in]', 'O': '[out]', 'IO': '[in,out]'}

SECTIONS = (
    (CLASS, 'Classes'),
    (ENUMERATION, 'Enumerations'),
    (FUNCTION, 'Functions'),
    (NAMESPACE, 'Namespaces'),
    (STRUCT, 'Structures'),
    (TYPEDEF, 'Typedefs'),
    (UNION, 'Unions'),
    (VARIABLE, 'Variables'),
)

# Heading underlines, by depth
HEADINGS = '=-~^'

_BACKTICK_RE = re.compile(r'(?<!`)`([^`\n]+)`(?!`)')
_LINK_RE = re.compile(r'\[([^\]]+)\]\(([^)\s]+)\)')
_HEADING_RE = re.compile(r'^(#{1,6})\s+(.*?)\s*#*$')


def get_doc_lines(l, indent='   '):
    if not l:
        return ['']
    if l.startswith('.. '):
        return [indent + l, '']
    return [indent + l]


def heading(text, depth):
    return [text, HEADINGS[min(depth, len(HEADINGS) - 1)] * len(text), '']


def literal(text):
    return '``' + text + '``'


def format_text(text):
    """Convert one line of description text to inline rst"""
    text = _BACKTICK_RE.sub(lambda m: literal(m.group(1)), text)
    text = _LINK_RE.sub(lambda m: '`%s <%s>`_' % (m.group(1), m.group(2)), text)
    return comment.replace_inline(text, lambda kind, value: literal(value.strip()))


def format_description(text):
    """Convert description text into rst lines"""
    text = comment.strip_markers(text)
    if not text:
        return []
    lines, fenced = [], False
    for l in text.split('\n'):
        if l.strip().startswith('```'):
            fenced = not fenced
            if fenced:
                if lines and lines[-1]:
                    lines.append('')
                lines.extend(['::', ''])
            else:
                lines.append('')
        elif fenced:
            if l.startswith('|'):
                l = l[2:] if l.startswith('| ') else l[1:]
            lines.append('   ' + l.rstrip() if l.strip() else '')
        else:
            lines.append(format_text(l.rstrip()))
    return lines


def format_body(text):
    """Convert the markdown body document into rst lines"""
    lines = []
    for l in format_description(text):
        m = _HEADING_RE.match(l)
        if m is None:
            lines.append(l)
            continue
        if lines and lines[-1]:
            lines.append('')
        lines.extend(heading(m.group(2), len(m.group(1))))
    return lines


def format_summary(text):
    """Description text on a single line, for field lists"""
    return format_text(' '.join(comment.strip_markers(text).split()))


def info_lines(text):
    ret = []
    since = comment.get_since(text)
    if since:
        ret.extend(['', '.. versionadded:: ' + since])
    if comment.is_deprecated(text):
        ret.extend(['', '.. note:: Deprecated, do not use in new code.'])
    return ret


def declaration(type_text, name):
    """Combine a type and a name the way it is written in C"""
    if not type_text:
        return name
    if name.startswith('(') or type_text.endswith(('*', '&')):
        return type_text + name
    return type_text + ' ' + name


def directive(kind, signature, text, indent='', fields=()):
    ret = ['%s.. %s:: %s' % (indent, kind, signature), '']
    doc = format_description(text or '') + info_lines(text or '')
    if fields:
        if doc and doc[-1]:
            doc.append('')
        doc.extend(fields)
    for l in doc:
        ret.extend(get_doc_lines(l, indent + '   '))
    if ret[-1] != '':
        ret.append('')
    return ret


def guess_domain(doc):
    """'cpp' if the tree holds anything only C++ can declare, else 'c'"""
    if next(doc.iter(CLASS, NAMESPACE), None) is not None:
        return 'cpp'
    for node in doc.iter(ARGUMENT, FUNCTION):
        if node.get('default') is not None or node.get('scope') is not None:
            return 'cpp'
    return 'c'


def param_name(argument):
    m = re.search(r'[A-Za-z_]\w*', argument.get('name'))
    return m.group(0) if m else None


def function_signature(function, domain, classname=None):
    name = function.get('name')
    returnvalue = find_child(function, RETURNVALUE)
    if returnvalue is not None:
        rtype = get_type(returnvalue)
    elif classname is not None and name.lstrip('~') == classname:
        rtype = '' # Constructor or destructor
    else:
        rtype = 'void'

    args = []
    for arg in function.findall(ARGUMENT):
        arg_text = declaration(get_type(arg) or '', arg.get('name'))
        if arg.get('default') is not None:
            arg_text += ' = ' + arg.get('default')
        args.append(arg_text)
    if not args and domain == 'c':
        args = ['void']
    return '%s(%s)' % (declaration(rtype, name), ', '.join(args))


def function_lines(function, domain, indent='', classname=None):
    fields = []
    for arg in function.findall(ARGUMENT):
        name = param_name(arg)
        if name is None:
            continue
        text = ' '.join(filter(None, [DIRECTIONS.get(arg.get('direction')),
                                      format_summary(get_description(arg) or '')]))
        fields.append((':param %s: %s' % (name, text)).rstrip())
    returnvalue = find_child(function, RETURNVALUE)
    if returnvalue is not None and get_description(returnvalue):
        fields.append(':return: ' + format_summary(get_description(returnvalue)))
    return directive(domain + ':function', function_signature(function, domain, classname),
                     get_description(function), indent, fields)


def variable_lines(variable, domain, kind='var', indent=''):
    fields = []
    if variable.get('default') is not None:
        fields.append(':Default: ' + literal(variable.get('default')))
    signature = declaration(get_type(variable) or '', variable.get('name'))
    return directive('%s:%s' % (domain, kind), signature, get_description(variable),
                     indent, fields)


def structure_lines(node, domain, indent=''):
    kind = node.tag
    if kind == CLASS:
        domain = 'cpp'
    name = node.get('name')
    signature = name
    if node.get('parent') and domain == 'cpp':
        signature += ' : ' + node.get('parent')
    ret = directive('%s:%s' % (domain, kind), signature, get_description(node), indent)

    inner = indent + '   '
    if kind == CLASS:
        for scope in ('public', 'protected', 'private'):
            members = [m for m in node if m.tag in (VARIABLE, FUNCTION) and m.get('scope') == scope]
            if not members:
                continue
            ret.extend(['%s.. rubric:: %s members' % (inner, scope.capitalize()), ''])
            ret.extend(member_lines(members, domain, inner, name))
    else:
        ret.extend(member_lines(node.findall(VARIABLE) + node.findall(FUNCTION), domain, inner, name))
    return ret


def member_lines(members, domain, indent, classname):
    ret = []
    for member in members:
        if comment.is_private(get_description(member)):
            continue
        if member.tag == VARIABLE:
            ret.extend(variable_lines(member, domain, 'member', indent))
        else:
            ret.extend(function_lines(member, domain, indent, classname))
    return ret


def enumeration_lines(enumeration, domain, indent=''):
    ret = directive(domain + ':enum', enumeration.get('name'),
                    get_description(enumeration), indent)
    for constant in enumeration:
        if constant.tag == CONSTANT and not comment.is_private(get_description(constant)):
            ret.extend(directive(domain + ':enumerator', constant.get('name'),
                                 get_description(constant), indent + '   '))
    return ret


def typedef_lines(typedef, domain, indent=''):
    fields = []
    if get_type(typedef):
        fields.append(':Type: ' + literal(get_type(typedef)))
    return directive(domain + ':type', typedef.get('name'), get_description(typedef),
                     indent, fields)


def namespace_lines(namespace, depth):
    name = namespace.get('name')
    ret = heading(name, depth)
    ret.extend(format_description(get_description(namespace) or ''))
    if ret[-1] != '':
        ret.append('')
    ret.extend(['.. cpp:namespace:: ' + name, ''])
    for kind, _ in SECTIONS:
        if kind == NAMESPACE:
            continue
        for node in find_public(namespace, kind, mode='rst'):
            ret.extend(entity_lines(node, 'cpp', depth))
    ret.extend(['.. cpp:namespace:: NULL', ''])
    for node in find_public(namespace, NAMESPACE, mode='rst'):
        ret.extend(namespace_lines(node, depth + 1))
    return ret


def entity_lines(node, domain, depth=2):
    kind = node.tag
    if kind == FUNCTION:
        return function_lines(node, domain)
    if kind in (CLASS, STRUCT, UNION):
        return structure_lines(node, domain)
    if kind == ENUMERATION:
        return enumeration_lines(node, domain)
    if kind == TYPEDEF:
        return typedef_lines(node, domain)
    if kind == VARIABLE:
        return variable_lines(node, domain)
    if kind == NAMESPACE:
        return namespace_lines(node, depth)
    raise ValueError('Unexpected %s node' % kind)


def get_rst_lines(doc, title=DEFAULT_TITLE, body=None, author=None, copyright=None,
                  version=None, section=None, domain=None):
    domain = domain or guess_domain(doc)
    ret = heading(title, 0)

    fields = [(k, v) for k, v in (('Author', author), ('Copyright', copyright),
                                  ('Version', version)) if v]
    if fields:
        ret.extend([':%s: %s' % field for field in fields])
        ret.append('')
    if section:
        ret.extend(['.. meta::', '   :keywords: ' + section, ''])
    if body:
        ret.extend(format_body(body))
        if ret[-1] != '':
            ret.append('')

    for kind, name in SECTIONS:
        nodes = list(find_public(doc, kind, mode='rst'))
        if not nodes:
            continue
        ret.extend(heading(name, 1))
        for node in nodes:
            ret.extend(entity_lines(node, domain))
    return ret


def write_rst(out, doc, **kwargs):
    """Write the public documentation in doc to the file object out"""
    out.write('\n'.join(get_rst_lines(doc, **kwargs)).rstrip('\n') + '\n')
