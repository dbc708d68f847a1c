""" UTF-8 character stream with line/column tracking and pushback """
import sys

EOF = ''

# Control characters that may not appear in source files
_ILLEGAL = set(range(0x00, 0x07)) | {0x08} | set(range(0x0e, 0x20)) | {0x7f}


def _msg(s):
    print(s, file=sys.stderr)


class FileBuf:
    """A source file read one code point at a time.

    Up to two characters may be pushed back with ungetc(); they are
    returned again, in order, before any more input is decoded.
    """

    def __init__(self, filename, data):
        self.filename = filename
        self.data = data
        self.pos = 0
        self.pending = ''
        self.line, self.column = 1, 1

    @classmethod
    def open(cls, filename):
        # Raises OSError if the file can't be read
        with open(filename, 'rb') as f:
            return cls(filename, f.read())

    def _fatal(self, what):
        _msg(f'{self.filename}:{self.line}({self.column}) {what}')
        sys.exit(1)

    def _getb(self):
        if self.pos >= len(self.data):
            return -1
        b = self.data[self.pos]
        self.pos += 1
        return b

    def getc(self):
        """Return the next character or EOF ('')"""
        if self.pending:
            ch, self.pending = self.pending[0], self.pending[1:]
            return ch

        b = self._getb()
        if b < 0:
            return EOF

        if b & 0x80:
            if (b & 0xe0) == 0xc0:
                extra, cp = 1, b & 0x1f
            elif (b & 0xf0) == 0xe0:
                extra, cp = 2, b & 0x0f
            elif (b & 0xf8) == 0xf0:
                extra, cp = 3, b & 0x07
            else:
                self._fatal('Illegal UTF-8 sequence found.')
            for _ in range(extra):
                b2 = self._getb()
                if b2 < 0 or (b2 & 0xc0) != 0x80:
                    self._fatal('Illegal UTF-8 sequence found.')
                cp = (cp << 6) | (b2 & 0x3f)
            if cp > 0x10ffff or 0xd800 <= cp <= 0xdfff:
                self._fatal('Illegal UTF-8 sequence found.')
            b = cp

        if b in _ILLEGAL:
            self._fatal('Illegal control character found.')
        ch = chr(b)

        if ch == '\t':
            # Traditional tabs are 8 columns
            self.column = ((self.column + 7) & ~7) + 1
        elif ch in '\n\f':
            self.line += 1
            self.column = 1
        elif ch == '\v':
            self.line += 1
        elif ch == '\r':
            self.column = 1
        else:
            self.column += 1
        return ch

    def ungetc(self, chars):
        """Push back one character, or two for a failed two-character lookahead"""
        if chars:
            assert len(self.pending) + len(chars) <= 2, 'too many pushed back characters'
            self.pending = chars + self.pending
