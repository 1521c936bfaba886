from .attributes import normalize_url, parse_attributes, sanitize_attributes
from .classifier import TagCategory, TagClassifier
from .entities import decode_entities, escape, escape_stray
from .errors import ConfigurationError
from .options import DEFAULT_OPTIONS, SanitizeOptions, UnknownTagPolicy
from .preprocess import postprocess, preprocess
from .rebalancer import Rebalancer, rebalance
from .sanitizer import Sanitizer, extract_plain_text, html_to_text, sanitize
from .tokenizer import Tokenizer, tokenize
from .tokens import Repair, StackEntry, TagToken, TextToken

__all__ = [
    "DEFAULT_OPTIONS",
    "ConfigurationError",
    "Rebalancer",
    "Repair",
    "SanitizeOptions",
    "Sanitizer",
    "StackEntry",
    "TagCategory",
    "TagClassifier",
    "TagToken",
    "TextToken",
    "Tokenizer",
    "UnknownTagPolicy",
    "decode_entities",
    "escape",
    "escape_stray",
    "extract_plain_text",
    "html_to_text",
    "normalize_url",
    "parse_attributes",
    "postprocess",
    "preprocess",
    "rebalance",
    "sanitize",
    "sanitize_attributes",
    "tokenize",
]
