""" Documentation generator for C and C++ source files """

__version__ = '3.2'

from codedoc.body import Body
from codedoc.filebuf import FileBuf
from codedoc.scanner import scan_file
from codedoc.tree import load_documentation, new_documentation, save_documentation
from codedoc.rst import write_rst
