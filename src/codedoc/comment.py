""" Comment normalization and special comment markers """
import re

PRIVATE = '@private@'
BODY = '@body@'
DEPRECATED = '@deprecated@'

# Output formats that may be named in an @exclude ...@ marker
FORMATS = ('epub', 'html', 'man', 'rst', 'xml')
# No longer supported, accepted and ignored
LEGACY_FORMATS = ('docset', 'tokens')

_SPACE = ' \t\n\r\v\f'
_DIRECTIONS = ('I ', 'O ', 'IO ')

_SINCE_RE = re.compile(r'@since ([^@]*)@')
_EXCLUDE_RE = re.compile(r'@exclude ([^@]*)@')
_INLINE_RE = re.compile(r'@(link|code) ([^@]*)@')
_MARKER_RE = re.compile(r'\s*(@private@|@deprecated@|@since [^@]*@|@exclude [^@]*@)')


def _strip_separator(s):
    s = s.lstrip(_SPACE)
    if s.startswith('-'):
        s = s[1:]
    return s.lstrip(_SPACE)


def update_comment(parent, text):
    """Normalize a raw comment into description text for parent.

    Strips a leading "'name()' - " summary prefix or an "I - ", "O - " or
    "IO - " direction prefix, recording the direction on argument nodes,
    along with any decorative asterisks.
    """
    s = text.replace('\\/', '/').lstrip(_SPACE + '*')

    if s.startswith("'"):
        # 'name()' - description
        end = s.find("'", 1)
        if end > 0:
            s = _strip_separator(s[end + 1:])
    elif s.startswith(_DIRECTIONS):
        direction, s = s.split(' ', 1)
        if parent is not None and parent.tag == 'argument':
            parent.set('direction', direction)
        s = _strip_separator(s)

    return s.lstrip('*').lstrip(_SPACE).rstrip('*').rstrip(_SPACE)


def is_private(text):
    return text is not None and PRIVATE in text


def is_body(text):
    return text.lstrip(_SPACE + '*').startswith(BODY)


def get_body(text):
    """Return the markdown following an @body@ marker"""
    s = text.lstrip(_SPACE + '*')[len(BODY):]
    return s.lstrip(' \t').lstrip('\n').rstrip(_SPACE + '*')


def is_excluded(text, mode):
    """True if text carries an @exclude@ marker for format mode (or all)"""
    for m in _EXCLUDE_RE.finditer(text or ''):
        formats = m.group(1).split(',')
        if formats == ['all'] or mode in formats:
            return True
        if any(f not in FORMATS + LEGACY_FORMATS for f in formats):
            # Unparseable marker: hidden everywhere
            return True
    return False


def get_since(text):
    m = _SINCE_RE.search(text or '')
    return m.group(1).strip() if m else None


def is_deprecated(text):
    return text is not None and DEPRECATED in text


def strip_markers(text):
    """Remove informational markers, leaving @link/@code text in place"""
    return _MARKER_RE.sub('', text or '').strip(_SPACE)


def replace_inline(text, fn):
    """Replace @link X@ and @code X@ markers with fn(kind, X)"""
    return _INLINE_RE.sub(lambda m: fn(m.group(1), m.group(2)), text)
