# src/tabmerge/config.py

# Section header written before every record in the combined output
HEADER_TEMPLATE = "// ===== File: {path} ====="

# Separator between the header and the content, and between sections
SECTION_SEPARATOR = "\n\n"

# Bytes sniffed for a NUL when deciding whether a document is text
BINARY_SNIFF_SIZE = 1024

TOKENIZER_ENCODING = "cl100k_base"
TOKENIZER_FALLBACK_ENCODING = "p50k_base"

EMPTY_LIST_MESSAGE = "No text files are open."
