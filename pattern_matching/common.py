"""
Commonly used regex patterns seeded into new registries.
"""

COMMON_PATTERNS = {
    "Email Address": {
        "pattern": r'[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}',
        "examples": ["info@example.com", "first.last+tag@mail.example.org"],
        "case_insensitive": True
    },
    "URL": {
        "pattern": r'https?://(?:www\.)?[-a-zA-Z0-9@:%._+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b(?:[-a-zA-Z0-9()@:%_+.~#?&/=]*)',
        "examples": ["https://www.example.com/path?q=1", "http://example.org"],
        "case_insensitive": True
    },
    "IP Address": {
        "pattern": r'\b(?:\d{1,3}\.){3}\d{1,3}\b',
        "examples": ["192.168.1.1", "10.0.0.254"]
    },
    "US Phone Number": {
        "pattern": r'\(?\d{3}\)?[-. ]?\d{3}[-. ]?\d{4}',
        "examples": ["(555) 123-4567", "555.123.4567", "5551234567"]
    },
    "Date (MM/DD/YYYY)": {
        "pattern": r'\b(0?[1-9]|1[0-2])/(0?[1-9]|[12]\d|3[01])/\d{4}\b',
        "examples": ["12/31/2023", "1/5/2024"]
    },
    "HTML Tag": {
        "pattern": r'<([a-zA-Z][a-zA-Z0-9]*)[^>]*>.*?</\1>',
        "examples": ["<b>bold</b>", '<a href="#">link</a>'],
        "multiline": True,
        "case_insensitive": True
    },
    "Credit Card Number": {
        "pattern": r'\b(?:\d{4}[-. ]?){3}\d{4}\b',
        "examples": ["1234-5678-9012-3456", "1234 5678 9012 3456"]
    },
    "ZIP Code": {
        "pattern": r'\b\d{5}(?:-\d{4})?\b',
        "examples": ["12345", "12345-6789"]
    },
    "Social Security Number": {
        "pattern": r'\b\d{3}[-. ]?\d{2}[-. ]?\d{4}\b',
        "examples": ["123-45-6789"]
    },
    "Hex Color Code": {
        "pattern": r'#[0-9a-fA-F]{6}',
        "examples": ["#FF5733", "#a1b2c3"],
        "case_insensitive": True
    },
}
