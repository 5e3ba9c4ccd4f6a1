import re
from html.entities import name2codepoint
from bs4 import BeautifulSoup
from logger_config import get_logger
from utils.decorators import traced

logger = get_logger(__name__)

# Any lone backslash before an unrecognised character is dropped
_ESCAPE = re.compile(
    r'\\(?:u+([0-9a-fA-F]{4})|(u+)|([0-3][0-7]{0,2}|[4-7][0-7]?)|([btnfr"\'\\]))?',
)
_SINGLE_CHAR_ESCAPES = {
    'b': '\b', 't': '\t', 'n': '\n', 'f': '\f', 'r': '\r',
    '"': '"', "'": "'", '\\': '\\',
}

# Only semicolon-terminated references; bare "&copy=2" in a query string stays
_ENTITY = re.compile(r'&(?:#([0-9]+)|#[xX]([0-9a-fA-F]+)|([A-Za-z][A-Za-z0-9]*));')

# Elements that break the text flow, so their words are not run together
BLOCK_TAGS = [
    'address', 'article', 'aside', 'blockquote', 'body', 'caption', 'center',
    'dd', 'details', 'div', 'dl', 'dt', 'fieldset', 'figcaption', 'figure',
    'footer', 'form', 'h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'head', 'header',
    'hgroup', 'hr', 'html', 'li', 'main', 'menu', 'nav', 'ol', 'p', 'pre',
    'section', 'table', 'tbody', 'td', 'tfoot', 'th', 'thead', 'title', 'tr',
    'ul',
]


def _replace_escape(match):
    hex_digits, short_unicode, octal_digits, char = match.groups()
    if hex_digits:
        return chr(int(hex_digits, 16))
    if short_unicode:
        raise ValueError(
            f'Less than 4 hex digits in unicode escape: {match.string[match.start():match.start() + 8]!r}'
        )
    if octal_digits:
        return chr(int(octal_digits, 8))
    if char:
        return _SINGLE_CHAR_ESCAPES[char]
    return ''


def unescape_unicode(text):
    """Decode backslash escapes such as \\u00e9, \\xe9, \\101 and \\n.

    A backslash before any other character is dropped, keeping the
    character. Raises ValueError for a \\u escape with fewer than four
    hex digits.
    """
    text = text.replace('\\x', '\\u00')
    return _ESCAPE.sub(_replace_escape, text)


def _replace_entity(match):
    decimal, hexadecimal, name = match.groups()
    if name:
        codepoint = name2codepoint.get(name)
    else:
        codepoint = int(decimal or hexadecimal, 10 if decimal else 16)
    if codepoint is None or codepoint > 0x10FFFF:
        return match.group(0)
    return chr(codepoint)


def unescape_entities(text):
    """Decode HTML 4 named and numeric character references (&gt; &#62; &#x3e;)"""
    return _ENTITY.sub(_replace_entity, text)


def strip_tags(text):
    """Return the text content of an HTML fragment, whitespace collapsed"""
    soup = BeautifulSoup(text, 'html.parser')
    for br in soup.find_all('br'):
        br.replace_with(' ')
    for tag in soup.find_all(BLOCK_TAGS):
        tag.insert_before(' ')
        tag.insert_after(' ')
    return ' '.join(soup.get_text().split())


@traced
def convert_html_to_string(raw_string, is_unicode, is_xml, is_html):
    """
    Clean a scraped string of escapes, entities and markup.

    Passes run in a fixed order and only when their flag is set:
    unicode escapes, then entities, then tags.
    """
    if is_unicode:
        raw_string = unescape_unicode(raw_string)

    if is_xml:
        raw_string = unescape_entities(raw_string)

    if is_html:
        raw_string = strip_tags(raw_string)

    return raw_string
