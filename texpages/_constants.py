"""Common literal values used across texpages.

These constants keep file extensions, the root slug, and placeholder token
shapes centralized so the scanner, link rewriter, navigation builder, and
tests can import the same values without drifting. Intended for internal use
within the texpages package.

Examples
--------
>>> from texpages import _constants
>>> _constants.BLOCK_PLACEHOLDER_TEMPLATE.format(id=3)
'MATHBLOCK3ENDMATH'
>>> "sir" + _constants.OUTPUT_EXTENSION
'sir.html'
"""

SOURCE_EXTENSION = ".md"
OUTPUT_EXTENSION = ".html"
INDEX_SLUG = "index"
PARENT_MARKER = "../"
FRONT_MATTER_MARKER = "---"

BLOCK_PLACEHOLDER_TEMPLATE = "MATHBLOCK{id}ENDMATH"
INLINE_PLACEHOLDER_TEMPLATE = "MATHINLINE{id}ENDMATH"
