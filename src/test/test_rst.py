import io
import unittest
from util import *
from codedoc import rst
from codedoc.tree import set_description

class RstTests(unittest.TestCase):

    def lines(self, doc, **kwargs):
        return rst.get_rst_lines(doc, **kwargs)

    def assert_lines(self, lines, expected):
        """Assert that expected appears as a contiguous run within lines"""
        for n in range(len(lines) - len(expected) + 1):
            if lines[n:n + len(expected)] == expected:
                return
        self.fail('%r not found in:\n%s' % (expected, '\n'.join(lines)))

    def test_format_text(self):
        self.assertEqual(rst.format_text('See @link foo()@ and `bar`'),
                         'See ``foo()`` and ``bar``')
        self.assertEqual(rst.format_text('Call @code x = 1@.'), 'Call ``x = 1``.')
        self.assertEqual(rst.format_text('Read [the docs](https://example.com/docs).'),
                         'Read `the docs <https://example.com/docs>`_.')
        self.assertEqual(rst.format_text('Already ``literal``'), 'Already ``literal``')

    def test_format_description(self):
        self.assertEqual(rst.format_description('Example:\n\n```\n| int x = 1;\n|\n```\nDone.'),
                         ['Example:', '', '::', '', '   int x = 1;', '', '', 'Done.'])
        self.assertEqual(rst.format_description('Text @since 1.0@ @deprecated@'), ['Text'])
        self.assertEqual(rst.format_description(''), [])

    def test_format_body(self):
        self.assertEqual(rst.format_body('# Intro\n\nText `x`\n\n## More ##'),
                         ['Intro', '-----', '', '', 'Text ``x``', '', 'More', '~~~~', ''])

    def test_header(self):
        lines = self.lines(new_documentation(), title='Test Docs', author='Someone',
                           copyright='Copyright 2024', version='1.0', section='Programming')
        self.assertEqual(lines, ['Test Docs', '=========', '',
                                 ':Author: Someone', ':Copyright: Copyright 2024',
                                 ':Version: 1.0', '',
                                 '.. meta::', '   :keywords: Programming', ''])
        self.assertEqual(self.lines(new_documentation()),
                         ['Documentation', '=============', ''])

    def test_body(self):
        lines = self.lines(new_documentation(), body='# Overview\n\nSome text.')
        self.assert_lines(lines, ['Overview', '--------', ''])
        self.assertIn('Some text.', lines)

    def test_guess_domain(self):
        self.assertEqual(rst.guess_domain(scan_fixture('type.cxx')), 'c')
        self.assertEqual(rst.guess_domain(scan_fixture('function.cxx')), 'cpp')
        self.assertEqual(rst.guess_domain(scan_fixture('namespace.cxx')), 'cpp')
        self.assertEqual(rst.guess_domain(new_documentation()), 'c')

    def test_functions(self):
        lines = self.lines(scan_fixture('function.cxx'))
        self.assert_lines(lines, ['Functions', '---------', ''])
        self.assert_lines(lines, ['.. cpp:function:: void greet(const char *name)', '',
                                  '   Print a greeting.', '',
                                  '   This function prints a greeting for the named person.',
                                  '', '   :param name: [in] Name of person', ''])
        self.assert_lines(lines, ['.. cpp:function:: int repeat(const char *s, int count = 2)',
                                  '', '   Repeat a string.'])
        self.assert_lines(lines, ['   .. versionadded:: 1.1', ''])
        self.assert_lines(lines, ['   :param s: [in] String to repeat',
                                  '   :param count: [in] Number of times',
                                  '   :return: Number of characters written'])
        self.assertFalse([l for l in lines if 'helper' in l])

    def test_c_function(self):
        doc = scan_string("/* 'run()' - Run it. @deprecated@ */\nvoid run(void) { }\n")
        lines = self.lines(doc)
        self.assert_lines(lines, ['.. c:function:: void run(void)', '', '   Run it.'])
        self.assertIn('   .. note:: Deprecated, do not use in new code.', lines)

    def test_types(self):
        lines = self.lines(scan_fixture('type.cxx'))
        self.assert_lines(lines, ['.. c:type:: number_t', '', '   Simple integer type', '',
                                  '   :Type: ``int``', ''])
        self.assert_lines(lines, ['.. c:type:: callback_t', '', '   Callback function', '',
                                  '   :Type: ``int(*)(void *data, int value)``', ''])
        self.assert_lines(lines, ['.. c:struct:: point_s', '', '   A point on a plane', '',
                                  '   .. c:member:: int x', '', '      Horizontal position', '',
                                  '   .. c:member:: int y', '', '      Vertical position', ''])
        self.assert_lines(lines, ['.. c:enum:: mode_e', '', '   Drawing modes', '',
                                  '   .. c:enumerator:: MODE_NONE', '', '      No drawing', ''])
        self.assert_lines(lines, ['.. c:var:: int total_count', '',
                                  '   Total number of things', '', '   :Default: ``1``', ''])
        for heading in ['Enumerations', 'Structures', 'Typedefs', 'Variables']:
            self.assertIn(heading, lines)
        self.assertNotIn('Functions', lines)
        self.assertFalse([l for l in lines if 'hidden' in l or 'counter' in l])

    def test_namespace(self):
        lines = self.lines(scan_fixture('namespace.cxx'))
        self.assert_lines(lines, ['Namespaces', '----------', '', 'draw', '~~~~', '',
                                  'Drawing library', '', '.. cpp:namespace:: draw', ''])
        self.assert_lines(lines, ['.. cpp:class:: shape : public object', '',
                                  '   A drawable shape', '',
                                  '   .. rubric:: Public members', '',
                                  '   .. cpp:function:: double area()', '',
                                  '      Area of the shape', '',
                                  '   .. cpp:function:: shape()', '',
                                  '      Create a shape.', '',
                                  '   .. cpp:function:: ~shape()', '',
                                  '      Destroy a shape', '',
                                  '   .. rubric:: Protected members', '',
                                  '   .. cpp:member:: int sides', '',
                                  '      Number of sides', '',
                                  '   .. rubric:: Private members', '',
                                  '   .. cpp:member:: int id', ''])
        self.assertIn('.. cpp:function:: float scale(float v, float factor = 1.0f)', lines)
        self.assert_lines(lines, ['.. cpp:namespace:: NULL', '', 'draw::detail', '^^^^^^^^^^^^',
                                  '', '.. cpp:namespace:: draw::detail', ''])
        self.assertIn('.. cpp:var:: int counter', lines)

    def test_excluded(self):
        doc = scan_string('int shown; /* Shown */\n'
                          'int gone; /* Gone @exclude rst@ */\n'
                          'int html_only; /* Not in HTML @exclude html@ */\n'
                          'int none;\n')
        lines = self.lines(doc)
        self.assertIn('.. c:var:: int shown', lines)
        self.assertIn('.. c:var:: int html_only', lines)
        self.assertNotIn('.. c:var:: int gone', lines)
        self.assertNotIn('.. c:var:: int none', lines)

    def test_private_members(self):
        doc = scan_string('struct s\n{\n  int a;\n  int b;\n};\n')
        set_description(child(child(doc, STRUCT, 's'), VARIABLE, 'b'), '@private@')
        lines = self.lines(doc)
        self.assertIn('   .. c:member:: int a', lines)
        self.assertNotIn('   .. c:member:: int b', lines)

    def test_write_rst(self):
        out = io.StringIO()
        rst.write_rst(out, scan_fixture('body.cxx'), title='Drawing')
        text = out.getvalue()
        self.assertTrue(text.startswith('Drawing\n=======\n'))
        self.assertTrue(text.endswith('   Draw everything.\n'))
        self.assertIn('.. c:function:: void draw(void)', text)


if __name__ == '__main__':
    unittest.main()
