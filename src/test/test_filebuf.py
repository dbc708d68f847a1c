import contextlib
import io
import unittest
from util import *

class FileBufTests(unittest.TestCase):

    def assert_fatal(self, data, message):
        f = FileBuf('bad.c', data)
        stderr = io.StringIO()
        with contextlib.redirect_stderr(stderr):
            with self.assertRaises(SystemExit) as e:
                while f.getc():
                    pass
        self.assertEqual(e.exception.code, 1)
        self.assertIn(message, stderr.getvalue())
        return stderr.getvalue()

    def test_decode(self):
        for text in ['int x;', 'héllo', '€ uro', 'smile \U0001f600', '']:
            self.assertEqual(read_all(text), text)

    def test_eof(self):
        f = FileBuf('<test>', b'a')
        self.assertEqual(f.getc(), 'a')
        for _ in range(3):
            self.assertEqual(f.getc(), '') # EOF is sticky

    def test_position(self):
        f = FileBuf('<test>', b'ab\n\tc\r\vd\fe')
        expected = [('a', 1, 2), ('b', 1, 3), ('\n', 2, 1), ('\t', 2, 9),
                    ('c', 2, 10), ('\r', 2, 1), ('\v', 3, 1), ('d', 3, 2),
                    ('\f', 4, 1), ('e', 4, 2)]
        for ch, line, column in expected:
            self.assertEqual((f.getc(), f.line, f.column), (ch, line, column))

    def test_ungetc(self):
        f = FileBuf('<test>', b'abc')
        self.assertEqual(f.getc(), 'a')
        f.ungetc('a')
        self.assertEqual(f.getc(), 'a')

        # Two characters of pushback for a failed lookahead
        self.assertEqual((f.getc(), f.getc()), ('b', 'c'))
        f.ungetc('bc')
        self.assertEqual([f.getc() for _ in range(3)], ['b', 'c', ''])

        f.ungetc('')
        self.assertEqual(f.getc(), '')

        with self.assertRaises(AssertionError):
            f.ungetc('xyz')

    def test_illegal_characters(self):
        for b in [0x00, 0x01, 0x06, 0x08, 0x0e, 0x1b, 0x1f, 0x7f]:
            self.assert_fatal(b'ok' + bytes([b]), 'Illegal control character found.')

        # Bell and the whitespace controls are allowed
        self.assertEqual(read_all(b'\x07\t\n\v\f\r'), '\x07\t\n\v\f\r')

    def test_illegal_utf8(self):
        for data in [b'\xff',          # Not a lead byte
                     b'\x80',          # Stray continuation byte
                     b'\xc3',          # Truncated sequence
                     b'\xc3(',         # Bad continuation byte
                     b'\xe2\x82',      # Truncated 3-byte sequence
                     b'\xed\xa0\x80',  # UTF-16 surrogate
                     b'\xf4\x90\x80\x80']: # Beyond U+10FFFF
            self.assert_fatal(data, 'Illegal UTF-8 sequence found.')

    def test_fatal_location(self):
        msg = self.assert_fatal(b'int x;\n  \x01', 'Illegal control')
        self.assertTrue(msg.startswith('bad.c:2(3) '))

    def test_open(self):
        f = FileBuf.open(fixture_path('function.cxx'))
        self.assertEqual(f.getc(), '/')
        self.assertTrue(f.filename.endswith('function.cxx'))

        with self.assertRaises(OSError):
            FileBuf.open(fixture_path('missing.cxx'))


if __name__ == '__main__':
    unittest.main()
