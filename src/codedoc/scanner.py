""" C/C++ source scanner: builds a documentation tree from declarations and comments """
import logging

from codedoc import comment, tree
from codedoc.filebuf import EOF
from codedoc.stringbuf import StringBuf

log = logging.getLogger(__name__)

# Scanner states
STATE_NONE, STATE_PREPROCESSOR, STATE_C_COMMENT, STATE_CXX_COMMENT, \
    STATE_STRING, STATE_CHARACTER, STATE_IDENTIFIER = range(7)

STATE_NAMES = ('none', 'preprocessor', 'c-comment', 'c++-comment',
               'string', 'character', 'identifier')

SCOPES = ('public', 'private', 'protected')

_SPACE = ' \t\n\v\f\r'

# At most this many unclaimed comments are remembered
_MAX_PENDING = 2


def _is_word(ch):
    return ch.isascii() and (ch.isalnum() or ch == '_')


def _is_identifier(ch):
    return _is_word(ch) or ch in ('[', ']', ':', '.', '~')


def _is_operator(name):
    return name == 'operator' or name.endswith('::operator')


def _new_variable(kind, tokens, parent=None):
    """Build a variable or argument node from declaration tokens.

    The last token is the name, or, for "type (*name)(args)", everything
    from the first parenthesis on. Tokens after an "=" are the default
    value.
    """
    tokens = list(tokens)
    default = None
    for n, (_, text) in enumerate(tokens):
        if text == '=':
            default = tree.join_tokens(tokens[n + 1:])
            tokens = tokens[:n]
            break
    if not tokens:
        return None

    if tokens[-1][1] == ')':
        start = len(tokens) - 1
        for n, (_, text) in enumerate(tokens):
            if text.startswith('('):
                start = n
                break
        name = tree.join_tokens(tokens[start:])
        tokens = tokens[:start]
    else:
        name = tokens.pop()[1]

    node = tree.new_element(kind, parent, name)
    if default:
        node.set('default', tree.xml_safe(default))
    tree.add_type(node, tokens)
    return node


def _publish(parent, node):
    """Sort node into parent unless its description marks it private"""
    if comment.is_private(tree.get_description(node)):
        log.debug('dropping private %s "%s"', node.tag, node.get('name'))
        tree.delete(node)
        return False
    tree.sort_node(parent, node)
    return True


class _PendingComment:
    def __init__(self, text, after_type):
        self.text = text
        self.after_type = after_type


class Scanner:
    """State for one scope of a source file.

    Nested namespace, struct, union, class and extern "C" bodies are
    scanned by a new Scanner sharing the same file and body document.
    """

    def __init__(self, file, node, namespace=None, body=None):
        self.file = file
        self.tree = node
        self.namespace = namespace
        self.body = body

        self.state = STATE_NONE
        self.buffer = StringBuf()
        self.braces = 0
        self.parens = 0
        self.scope = 'private' if node.tag == tree.CLASS else None

        # Declaration tokens seen so far: (whitespace, text)
        self.type = []
        # Base type for the next declarator after a ','
        self.declarator = None

        self.constant = None
        self.enumeration = None
        self.expect_constant = False
        self.function = None
        self.fstructclass = None
        self.static = False
        self.args_open = False
        self.structclass = None
        self.typedefnode = None
        self.typedef_of = None
        self.variable = None

        self.pending = []
        self.comment_line = 0
        self.comment_after_type = False
        self.last_code_line = 0
        self.skip_space = False

    def scan(self):
        handlers = {
            STATE_NONE: self._none,
            STATE_PREPROCESSOR: self._preprocessor,
            STATE_C_COMMENT: self._c_comment,
            STATE_CXX_COMMENT: self._cxx_comment,
            STATE_STRING: self._literal,
            STATE_CHARACTER: self._literal,
            STATE_IDENTIFIER: self._identifier,
        }
        while True:
            ch = self.file.getc()
            if ch == EOF:
                return
            old_state = self.state
            if handlers[self.state](ch):
                return
            if self.state != old_state:
                log.debug('%s:%d: %s -> %s on %r', self.file.filename, self.file.line,
                          STATE_NAMES[old_state], STATE_NAMES[self.state], ch)

    #
    # Helpers
    #

    def _unit(self):
        # Static symbols aren't documented at translation unit scope
        return self.tree.tag in (tree.CODEDOC, tree.NAMESPACE)

    def _typing(self):
        return bool(self.type) and not self.braces

    def _push(self, whitespace, text):
        if not self.type and not self.braces:
            # A new declaration, trailing comments no longer apply to the last one
            self.variable = None
            if self.typedefnode is not None and self.typedefnode.get('name'):
                self.typedefnode = self.typedef_of = None
        self.type.append((whitespace, text))

    def _push_operator(self, ch):
        if self._typing():
            self._push(_is_word(self.type[-1][1][0]), ch)

    def _ident_whitespace(self):
        return bool(self.type) and not self.type[-1][1].startswith(('(', '*'))

    def _base_type(self):
        base = []
        for whitespace, text in self.type:
            if text in ('*', '&'):
                break
            base.append((whitespace, text))
        return base

    def _claim(self):
        """Take the most recent pending comment, forgetting any older ones"""
        if not self.pending:
            return None
        text = self.pending[-1].text
        self.pending = []
        return text

    def _describe(self, node, text, always=False):
        if text is not None:
            tree.set_description(node, comment.update_comment(node, text))
        elif always:
            tree.set_description(node, '')

    def _awaiting_name(self):
        return ((self.typedefnode is not None and not self.typedefnode.get('name')) or
                (self.structclass is not None and not self.structclass.get('name')))

    #
    # STATE_NONE
    #

    def _none(self, ch):
        file = self.file
        if ch in _SPACE:
            return False

        line = file.line
        if ch == '/':
            ch2 = file.getc()
            if ch2 in ('*', '/'):
                self.state = STATE_C_COMMENT if ch2 == '*' else STATE_CXX_COMMENT
                self.buffer.clear()
                self.comment_line = line
                self.comment_after_type = self._typing()
                self.skip_space = False
                return False
            file.ungetc(ch2)
            self.last_code_line = line
            self._push_operator('/')
            return False

        self.last_code_line = line
        if ch == '#':
            self.state = STATE_PREPROCESSOR
            self.pending = []
        elif ch in ('"', "'"):
            self.state = STATE_STRING if ch == '"' else STATE_CHARACTER
            self.buffer.clear()
            self.buffer.append(ch)
        elif ch == '{':
            self._open_brace()
        elif ch == '}':
            return self._close_brace()
        elif ch == '(':
            if self._typing():
                self._push(False, '(')
            self.parens += 1
        elif ch == ')':
            self._close_paren()
        elif ch == ';':
            self._semicolon()
        elif ch == ',':
            self._comma()
        elif ch in (':', '&'):
            if self._typing():
                self._push(True, ch)
        elif ch in ('*', '+', '-', '='):
            self._push_operator(ch)
        elif _is_word(ch) or ch in ('.', '~'):
            self.state = STATE_IDENTIFIER
            self.buffer.clear()
            self.buffer.append(ch)
        return False

    def _open_brace(self):
        words = [text for _, text in self.type]
        first, second = (words + [None, None])[:2]
        initializer = '=' in words

        if self.function is not None:
            self._finish_function()
            self.braces += 1
        elif self.braces:
            self.braces += 1
        elif not initializer and (first in tree.STRUCTURES or
                                 (first == 'typedef' and second in tree.STRUCTURES)):
            self._open_structure()
        elif not initializer and (first == 'enum' or (first == 'typedef' and second == 'enum')):
            self._open_enumeration()
            self.braces += 1
        elif first == 'namespace':
            self._open_namespace()
        elif first == 'extern':
            self.type = []
            scan_file(self.file, self.tree, self.namespace, self.body)
        else:
            self.type = []
            self.braces += 1
        self.variable = None

    def _close_brace(self):
        self.constant = None
        if self.typedefnode is None:
            self.enumeration = None
        if not self.braces:
            return True # End of this scope
        self.braces -= 1
        if not self.braces:
            self.pending = []
            self.expect_constant = False
        return False

    def _close_paren(self):
        if self.function is not None and self.args_open and self.parens == 1:
            if len(self.type) >= 2:
                self._add_argument()
            else:
                self.type = []
        elif self.parens and self._typing():
            self._push(False, ')')
        if self.parens:
            self.parens -= 1
        if not self.parens:
            self.args_open = False

    def _comma(self):
        if self.function is not None and self.args_open and self.parens == 1:
            # Argument ending in a literal or punctuation
            if len(self.type) >= 2:
                self._add_argument()
            else:
                self.type = []
        elif self.enumeration is not None and self.braces:
            self.expect_constant = True
        elif self.declarator is not None and not self.braces:
            self.type, self.declarator = self.declarator, None
        elif self._typing():
            self._push(False, ',')

    def _semicolon(self):
        if self.function is not None:
            function, published = self.function, False
            if self.static and self._unit():
                log.debug('dropping static function "%s"', function.get('name'))
            elif self.tree.tag == tree.CLASS:
                published = _publish(self.tree, function)
            self._end_function()
            if published and not tree.get_description(function):
                # A trailing comment documents the method
                self.variable = function

        if self.type and not self.braces and not self.parens:
            texts = [text for _, text in self.type]
            if texts[0] == 'typedef':
                self._add_typedef()
            elif any(_is_operator(text) for text in texts):
                log.debug('ignoring operator declaration')
            elif '=' in texts[1:] and texts[0] != 'using':
                # Initialized variable ending in a literal or expression
                if texts[0] == 'static' and self._unit():
                    log.debug('dropping static variable')
                else:
                    self._declare_variable()
        self.type = []
        self.declarator = None

        if not self.braces:
            self.structclass = None
            self.enumeration = None
            self.expect_constant = False

    #
    # Declarations
    #

    def _start_function(self, name):
        if self.type and self.type[0][1] == 'extern':
            # External declarations are documented where they are defined
            self.type = []
            return

        function = tree.new_element(tree.FUNCTION)
        classname, sep, method = name.partition('::')
        if sep and classname:
            self.fstructclass = tree.find_child(self.tree, tree.CLASS, classname)
            if self.fstructclass is None:
                self.fstructclass = tree.find_child(self.tree, tree.STRUCT, classname)
            name = method
        function.set('name', name)
        if self.scope:
            function.set('scope', self.scope)

        self.static = bool(self.type) and self.type[0][1] == 'static'
        if self.type and (self.type[-1][1] != 'void' or self.static):
            returnvalue = tree.new_element(tree.RETURNVALUE, function)
            tree.add_type(returnvalue, self.type)
            if self.pending and self.pending[-1].after_type:
                self._describe(returnvalue, self.pending.pop().text)
        self._describe(function, self._claim(), always=True)

        log.debug('function "%s", scope=%s', name, self.scope)
        self.function = function
        self.args_open = True
        self.type = []
        self.variable = None

    def _add_argument(self):
        self.variable = _new_variable(tree.ARGUMENT, self.type, self.function)
        self.type = []
        if self.variable is not None:
            log.debug('argument "%s"', self.variable.get('name'))

    def _finish_function(self):
        function = self.function
        if self.static and self._unit():
            log.debug('dropping static function "%s"', function.get('name'))
        elif self.fstructclass is not None:
            _publish(self.fstructclass, function)
        else:
            _publish(self.tree, function)
        self._end_function()

    def _end_function(self):
        self.function = self.fstructclass = None
        self.static = self.args_open = False
        self.variable = None
        self.type = []

    def _declare_variable(self):
        variable = _new_variable(tree.VARIABLE, self.type)
        self.type = []
        if variable is None:
            return
        if self.scope:
            variable.set('scope', self.scope)
        self._describe(variable, self._claim())
        log.debug('variable "%s", scope=%s', variable.get('name'), self.scope)
        if _publish(self.tree, variable):
            self.variable = variable

    def _add_typedef(self):
        """Finish "typedef ... ;" where the name isn't the last token"""
        tokens = self.type[1:]
        texts = [text for _, text in tokens]
        index = len(tokens) - 1
        if '(' in texts:
            n = texts.index('(') + 1
            while n < len(texts) and texts[n] == '*':
                n += 1
            if n < len(texts):
                index = n
        if index < 0:
            return
        name = texts[index]
        del tokens[index]
        self._new_typedef(name, tokens)

    def _new_typedef(self, name, tokens):
        if tokens:
            tokens[0] = (False, tokens[0][1])
        typedefnode = tree.new_element(tree.TYPEDEF, name=name)
        tree.add_type(typedefnode, tokens)
        self._describe(typedefnode, self._claim())
        log.debug('typedef "%s"', name)
        if _publish(self.tree, typedefnode):
            self.typedefnode = typedefnode
            self.typedef_of = None

    def _bind_name(self, name):
        """Name the typedef and/or anonymous struct/enum of "typedef ... { } name;" """
        companion = self.structclass if self.structclass is not None else self.enumeration
        if companion is not None and not companion.get('name'):
            log.debug('naming anonymous %s "%s"', companion.tag, name)
            companion.set('name', name)
            _publish(self.tree, companion)

        typedefnode = self.typedefnode
        if typedefnode is not None and not typedefnode.get('name'):
            typedefnode.set('name', name)
            tokens = self.type
            if len(tokens) == 1 and companion is not None:
                tokens.append((True, companion.get('name')))
            if tokens:
                tokens[0] = (False, tokens[0][1])
            tree.add_type(typedefnode, tokens)
            log.debug('typedef "%s"', name)
            if _publish(self.tree, typedefnode):
                self.typedef_of = companion
            else:
                self.typedefnode = None
        self.type = []
        self.structclass = None

    def _open_structure(self):
        tokens = list(self.type)
        typedef = tokens[0][1] == 'typedef'
        if typedef:
            tokens = tokens[1:]
        kind = tokens[0][1]

        name, parent = None, None
        if len(tokens) > 1:
            name = tokens[1][1]
            rest = tokens[2:]
            if name.endswith(':') and not name.endswith('::'):
                name = name[:-1]
            if rest and rest[0][1] == ':':
                rest = rest[1:]
            if rest:
                parent = tree.join_tokens(rest)

        structclass = tree.new_element(kind, name=name or None)
        if parent:
            structclass.set('parent', tree.xml_safe(parent))
        text = self._claim()
        self._describe(structclass, text, always=True)

        if typedef:
            self.typedefnode = tree.new_element(tree.TYPEDEF)
            self._describe(self.typedefnode, text)
            self.type = [(False, kind)] + ([(True, name)] if name else [])
        else:
            self.typedefnode = None
            self.type = []
        self.typedef_of = None

        log.debug('%s "%s", parent=%s', kind, name, parent)
        if name:
            _publish(self.tree, structclass)
        scan_file(self.file, structclass, self.namespace, self.body)
        self.structclass = structclass

    def _open_enumeration(self):
        tokens = list(self.type)
        typedef = tokens[0][1] == 'typedef'
        if typedef:
            tokens = tokens[1:]
        tokens = tokens[1:]
        if tokens and tokens[0][1] in ('class', 'struct'):
            tokens = tokens[1:]
        name = tokens[0][1].rstrip(':') if tokens else None

        enumeration = tree.new_element(tree.ENUMERATION, name=name or None)
        text = self._claim()
        self._describe(enumeration, text, always=True)

        if typedef:
            self.typedefnode = tree.new_element(tree.TYPEDEF)
            self._describe(self.typedefnode, text)
            self.type = [(False, 'enum')] + ([(True, name)] if name else [])
        else:
            self.typedefnode = None
            self.type = []
        self.typedef_of = None

        log.debug('enumeration "%s"', name)
        if name:
            _publish(self.tree, enumeration)
        self.enumeration = enumeration
        self.expect_constant = True
        self.constant = None

    def _open_namespace(self):
        name = self.type[1][1] if len(self.type) > 1 else None
        self.type = []
        text = self._claim()

        if name:
            qualified = f'{self.namespace}::{name}' if self.namespace else name
            namespace = tree.find_child(self.tree, tree.NAMESPACE, qualified)
            if namespace is None:
                namespace = tree.new_element(tree.NAMESPACE, name=qualified)
                tree.sort_node(self.tree, namespace)
            if text is not None or tree.get_description(namespace) is None:
                self._describe(namespace, text, always=True)
        else:
            # Anonymous namespaces hold nothing that can be referenced
            qualified = self.namespace
            namespace = tree.new_element(tree.NAMESPACE)

        log.debug('namespace "%s"', qualified)
        scan_file(self.file, namespace, qualified, self.body)

    def _add_constant(self, name):
        constant = tree.new_element(tree.CONSTANT, name=name)
        self._describe(constant, self._claim())
        self.expect_constant = False
        log.debug('constant "%s"', name)
        if comment.is_private(tree.get_description(constant)):
            return
        tree.append_node(self.enumeration, constant)
        self.constant = constant

    #
    # STATE_IDENTIFIER
    #

    def _identifier(self, ch):
        if _is_identifier(ch) or (ch == ',' and self._absorbs_comma()):
            self.buffer.append(ch)
        else:
            self.file.ungetc(ch)
            self.state = STATE_NONE
            self._end_identifier(self.buffer.get(), ch)
        return False

    def _absorbs_comma(self):
        # Commas inside nested parenthesis are part of the type
        return self.parens > 1 or (self.parens > 0 and bool(self.type) and
                                   self.enumeration is None and self.function is None)

    def _end_identifier(self, name, ch):
        if self.braces:
            if self.enumeration is not None and self.expect_constant and not name[0].isdigit():
                self._add_constant(name)
            elif self.enumeration is None:
                self.type = []
            return

        if not self.type and self.tree.tag == tree.CLASS and name.rstrip(':') in SCOPES:
            self.scope = name.rstrip(':')
            return

        if self.function is None and ch == '(':
            self._start_function(name)
        elif self.function is not None and self.args_open and self.parens == 1 and ch in (')', ','):
            if name == 'void' and not self.type:
                return # (void)
            self._push(self._ident_whitespace(), name)
            self._add_argument()
        elif self.function is None and self.type and ch in (';', ','):
            if self._awaiting_name():
                self._bind_name(name)
            elif self.type[0][1] == 'typedef':
                # Simple typedef
                base = self._base_type() if ch == ',' else None
                self._new_typedef(name, self.type[1:])
                self.type, self.declarator = [], base
            elif self.type[0][1] == 'using' or (len(self.type) == 1 and
                                                   self.type[0][1] in tree.STRUCTURES + ('enum',)):
                # Using declarations and forward declarations
                self.type = []
            elif not self.parens:
                base = self._base_type() if ch == ',' else None
                if self.type[0][1] == 'static' and self._unit():
                    log.debug('dropping static variable "%s"', name)
                    self.type = []
                else:
                    self._push(self._ident_whitespace(), name)
                    self._declare_variable()
                self.declarator = base
        else:
            self._push(self._ident_whitespace(), name)

    #
    # Comments
    #

    def _c_comment(self, ch):
        file, buffer = self.file, self.buffer
        if ch == '\n':
            # Skip the leading whitespace and '*' of the next line
            while True:
                ch = file.getc()
                if ch == EOF:
                    break
                if ch == '*':
                    ch2 = file.getc()
                    if ch2 == '/':
                        self._end_comment(buffer.get())
                        return False
                    file.ungetc(ch2)
                elif ch == '\n':
                    if len(buffer):
                        buffer.append('\n')
                elif ch not in _SPACE:
                    break
            if ch != EOF:
                file.ungetc(ch)
            if len(buffer):
                buffer.append('\n')
        elif ch == '/' and buffer.getlast() == '*':
            self._end_comment(buffer.get()[:-1].rstrip(_SPACE + '*'))
        elif ch == '\r' or (ch in (' ', '\t') and not len(buffer)):
            pass
        else:
            buffer.append(ch)
        return False

    def _cxx_comment(self, ch):
        file, buffer = self.file, self.buffer
        if ch == '\n':
            if self.comment_line != self.last_code_line:
                # Merge with a "//" comment on the following line
                ch = file.getc()
                while ch in (' ', '\t'):
                    ch = file.getc()
                if ch == '/':
                    ch2 = file.getc()
                    if ch2 == '/':
                        if len(buffer):
                            buffer.append('\n')
                        self.skip_space = True
                        return False
                    file.ungetc(ch + ch2)
                else:
                    file.ungetc(ch)
            self._end_comment(buffer.get())
        elif ch == '\r':
            pass
        elif ch == ' ' and (not len(buffer) or self.skip_space):
            self.skip_space = False
        else:
            buffer.append(ch)
            self.skip_space = False
        return False

    def _end_comment(self, text):
        self.state = STATE_NONE
        trailing = self.comment_line == self.last_code_line
        log.debug('comment %r, trailing=%s', text[:40], trailing)

        if comment.is_body(text):
            if self.body is not None:
                self.body.append(comment.get_body(text))
            return

        if self.braces and self.enumeration is None:
            return # Inside a function or initializer body

        if self.variable is not None and (trailing or self.variable.tag == tree.ARGUMENT):
            self._attach(self.variable, text)
            self.variable = None
        elif self.constant is not None and trailing:
            self._attach(self.constant, text)
            self.constant = None
        elif self.typedefnode is not None and self.typedefnode.get('name') and trailing:
            self._attach(self.typedefnode, text)
            if self.typedef_of is not None:
                self._attach(self.typedef_of, text)
            self.typedefnode = self.typedef_of = None
        elif (self.tree.tag in tree.STRUCTURES and not self.braces and not self.type and
              tree.get_description(self.tree) is None):
            self._describe(self.tree, text)
        else:
            if not trailing:
                self.variable = self.constant = None
                if self.typedefnode is not None and self.typedefnode.get('name'):
                    self.typedefnode = self.typedef_of = None
            self.pending.append(_PendingComment(text, self.comment_after_type))
            del self.pending[:-_MAX_PENDING]

    def _attach(self, node, text):
        if comment.is_private(text):
            log.debug('dropping private %s "%s"', node.tag, node.get('name'))
            tree.delete(node)
        else:
            self._describe(node, text)

    #
    # Other states
    #

    def _preprocessor(self, ch):
        file = self.file
        if ch == '\n':
            self.state = STATE_NONE
        elif ch == '\\':
            file.getc()
        elif ch == '/':
            ch2 = file.getc()
            if ch2 == '*':
                # Comments may span lines, and are never documentation here
                while ch2 != EOF:
                    ch2 = file.getc()
                    if ch2 == '*':
                        ch3 = file.getc()
                        if ch3 == '/':
                            break
                        file.ungetc(ch3)
            else:
                file.ungetc(ch2)
        return False

    def _literal(self, ch):
        buffer = self.buffer
        buffer.append(ch)
        if ch == '\\':
            ch2 = self.file.getc()
            if ch2 != EOF:
                buffer.append(ch2)
        elif ch == ('"' if self.state == STATE_STRING else "'"):
            if self._typing():
                self._push(True, buffer.get())
            self.state = STATE_NONE
        return False


def scan_file(file, node, namespace=None, body=None):
    """Scan file into the documentation tree node.

    Returns at end of file or at the '}' closing the scope being scanned;
    nested scopes are scanned by recursive calls. Text of "@body@"
    comments is appended to body when one is given.
    """
    Scanner(file, node, namespace, body).scan()
