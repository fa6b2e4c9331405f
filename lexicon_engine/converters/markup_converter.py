"""
Dictionary Markup-to-Markdown Converter

Converts the per-entry markup of the source dictionaries into markdown. The
dictionaries span thirty-odd historical formats that share a loose HTML-like
vocabulary, so conversion is driven by a table of tag handlers rather than a
fixed grammar. Headword tags of Sanskrit dictionaries are transliterated into
the requested output scheme.

A tag handler is one of:

- a string, written before and after the tag's processed children;
- a TagReplacement(open, close) pair, written the same way;
- a callable ``handler(element, parser)`` that takes full control of the
  output for that tag. It receives the bs4 Tag (attributes, descendants) and
  the parser (``add_to_markdown``, ``descend``, ``process_element``,
  ``config``). ``descend`` schedules the children on the traversal stack and
  takes a ``then`` callback for output that follows them; ``process_element``
  processes them before returning.

Malformed markup never raises: the html.parser tree builder is tolerant and
traversal only visits actual child nodes. A custom handler that recurses past
the interpreter limit degrades to the fragment's plain text.
"""

import logging
import re
from dataclasses import dataclass
from functools import partial
from types import MappingProxyType
from typing import Callable, Mapping, Optional, Union

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag

from .. import scripts
from ..dictionaries import DEFAULT_HEADWORD_TAG, DictionaryName, get_dictionary_config

logger = logging.getLogger(__name__)

MARKUP_PATTERN = re.compile(r"</?[a-z][\s\S]*>", re.IGNORECASE)
EXCESS_NEWLINES = re.compile(r"\n{3,}")
LINE_BREAK = "  \n"


@dataclass(frozen=True)
class TagReplacement:
    """Open/close strings written around a tag's processed children."""
    open: str = ""
    close: str = ""


TagHandler = Callable[[Tag, "LexiconMarkupParser"], None]
HandlerType = Union[str, TagReplacement, TagHandler]


@dataclass(frozen=True)
class ParserConfig:
    """Per-entry parser settings, resolved once from the dictionary table."""
    dictionary: Optional[DictionaryName] = None
    headword_tag: str = DEFAULT_HEADWORD_TAG
    transliterate_headwords: bool = False
    from_scheme: str = scripts.SLP1
    to_scheme: str = scripts.DEVANAGARI
    key_word: str = ""

    @classmethod
    def for_dictionary(
        cls,
        dictionary=None,
        key_word: str = "",
        to_scheme: str = scripts.DEVANAGARI,
    ) -> "ParserConfig":
        """
        Build the settings for a dictionary.

        Args:
            dictionary: Dictionary name or enum member; None for generic markup.
            key_word: The entry's headword, used for context-sensitive handlers.
            to_scheme: Scheme headwords are rendered in.

        Raises:
            UnknownDictionaryError: If `dictionary` is not a known dictionary.
        """
        if dictionary is None:
            return cls(key_word=key_word, to_scheme=to_scheme)

        config = get_dictionary_config(dictionary)
        return cls(
            dictionary=config.name,
            headword_tag=config.headword_tag,
            transliterate_headwords=config.is_sanskrit,
            from_scheme=config.headword_scheme,
            to_scheme=to_scheme,
            key_word=key_word,
        )


# ──────────────────────────────────────────────────────────────
# DEFAULT HANDLERS
# ──────────────────────────────────────────────────────────────

def _emphasis(marker: str) -> TagHandler:
    def handler(element: Tag, parser: "LexiconMarkupParser") -> None:
        if parser.is_headword_tag(element.name):
            text = parser.transliterate(element.get_text().strip())
            parser.add_to_markdown(f"{marker}{text}{marker}")
            return
        parser.add_to_markdown(marker)
        parser.descend(element, then=partial(parser.add_to_markdown, marker))
    return handler


def _sanskrit_word(element: Tag, parser: "LexiconMarkupParser") -> None:
    if parser.is_headword_tag(element.name):
        parser.add_to_markdown(parser.transliterate(element.get_text().strip()))
    else:
        parser.descend(element)


def _line_break(element: Tag, parser: "LexiconMarkupParser") -> None:
    parser.add_to_markdown(LINE_BREAK)


def _horizontal_rule(element: Tag, parser: "LexiconMarkupParser") -> None:
    parser.add_to_markdown("\n---\n\n")


def _link(element: Tag, parser: "LexiconMarkupParser") -> None:
    href = element.get("href")
    if href:
        parser.add_to_markdown("[")
        parser.descend(element, then=partial(parser.add_to_markdown, f"]({href})"))
    else:
        parser.descend(element)


def _blockquote(element: Tag, parser: "LexiconMarkupParser") -> None:
    parser.add_to_markdown("\n> ")
    mark = parser.buffer_size

    def close() -> None:
        parser.trim_trailing_whitespace(since=mark)
        parser.add_to_markdown("\n\n")

    parser.descend(element, then=close)


def _container(element: Tag, parser: "LexiconMarkupParser") -> None:
    # Separate adjacent blocks so their text does not run together.
    def close() -> None:
        if not parser.ends_with(" "):
            parser.add_to_markdown(" ")

    parser.descend(element, then=close)


def _table_row(element: Tag, parser: "LexiconMarkupParser") -> None:
    cells = element.find_all(["th", "td"], recursive=False)
    if not cells:
        return
    parser.add_to_markdown("| ")
    for index, cell in enumerate(cells):
        if index:
            parser.add_to_markdown(" | ")
        mark = parser.buffer_size
        parser.process_element(cell)
        parser.trim_trailing_whitespace(since=mark)
    parser.add_to_markdown(" |\n")


def _no_op(element: Tag, parser: "LexiconMarkupParser") -> None:
    return None


DEFAULT_TAG_HANDLERS: Mapping[str, HandlerType] = MappingProxyType({
    "p": TagReplacement("\n\n", "\n\n"),
    "br": _line_break,
    "lb": _line_break,
    "hr": _horizontal_rule,
    "b": _emphasis("**"),
    "strong": _emphasis("**"),
    "i": _emphasis("*"),
    "em": _emphasis("*"),
    "s": _sanskrit_word,
    "u": "_",
    **{f"h{level}": TagReplacement("\n" + "#" * level + " ", "\n\n") for level in range(1, 7)},
    "ul": TagReplacement("\n", "\n"),
    "ol": TagReplacement("\n", "\n"),
    "li": TagReplacement("- ", "\n"),
    "a": _link,
    "blockquote": _blockquote,
    "code": "`",
    "pre": TagReplacement("\n```\n", "\n```\n\n"),
    "dl": TagReplacement("\n", "\n"),
    "dt": TagReplacement("\n**", "**\n"),
    "dd": TagReplacement(": ", "\n"),
    "table": TagReplacement("\n", "\n"),
    "thead": TagReplacement("", ""),
    "tbody": TagReplacement("", ""),
    "tfoot": TagReplacement("", ""),
    "tr": _table_row,
    "th": _no_op,
    "td": _no_op,
    "sup": "^",
    "sub": "~",
    "del": "~~",
    "strike": "~~",
    "div": _container,
    "span": _container,
})


# ──────────────────────────────────────────────────────────────
# DICTIONARY-SPECIFIC HANDLER FACTORIES
# ──────────────────────────────────────────────────────────────

def line_break_on_attribute(attribute: str, sentinel: str, marker: str = LINE_BREAK) -> TagHandler:
    """Handler that emits `marker` only when `attribute` equals `sentinel`."""
    def handler(element: Tag, parser: "LexiconMarkupParser") -> None:
        if element.get(attribute) == sentinel:
            parser.add_to_markdown(marker)
        parser.descend(element)
    return handler


def suppress_headword_repetition() -> TagHandler:
    """
    Handler that drops a headword tag repeating the entry's own key word.

    Many dictionaries open each entry by restating the headword; the word is
    already stored separately, so the body can skip it. Other tags fall back to
    the default handling for their name.
    """
    def handler(element: Tag, parser: "LexiconMarkupParser") -> None:
        key_word = parser.config.key_word.strip()
        if key_word and parser.is_headword_tag(element.name):
            text = element.get_text().strip()
            spellings = {key_word, scripts.convert(key_word, scripts.SLP1, parser.config.from_scheme)}
            if text in spellings:
                return
        parser.apply_default(element)
    return handler


def normalize_handler(value) -> Optional[HandlerType]:
    """Coerce a caller-supplied handler into a HandlerType, or None if unusable."""
    if isinstance(value, (str, TagReplacement)):
        return value
    if isinstance(value, Mapping):
        custom = value.get("handler")
        if callable(custom):
            return custom
        if "open" in value or "close" in value:
            return TagReplacement(str(value.get("open") or ""), str(value.get("close") or ""))
        return None
    if callable(value):
        return value
    return None


def build_handler_table(custom_handlers: Optional[Mapping] = None) -> Mapping[str, HandlerType]:
    """Merge custom handlers over the defaults into a read-only table."""
    table = dict(DEFAULT_TAG_HANDLERS)
    for tag_name, value in (custom_handlers or {}).items():
        handler = normalize_handler(value)
        if handler is None:
            logger.debug("Ignoring unusable handler for <%s>: %r", tag_name, value)
            continue
        table[str(tag_name).lower()] = handler
    return MappingProxyType(table)


# ──────────────────────────────────────────────────────────────
# PARSER
# ──────────────────────────────────────────────────────────────

class LexiconMarkupParser:
    """
    Converts dictionary entry markup to markdown.

    A parser instance accumulates output across `feed` calls until `init` is
    called again. Instances are cheap; create one per entry when processing
    entries concurrently.

    Traversal runs off an explicit stack, so nesting depth is bounded by
    memory rather than the interpreter's recursion limit.
    """

    def __init__(self, config: Optional[ParserConfig] = None, custom_handlers: Optional[Mapping] = None):
        self.init(config, custom_handlers)

    def init(self, config: Optional[ParserConfig] = None, custom_handlers: Optional[Mapping] = None) -> None:
        """Reset the output buffer and install settings and handlers."""
        self._config = config or ParserConfig()
        self._handlers = build_handler_table(custom_handlers)
        self._markdown: list[str] = []
        self._unhandled_tags: set[str] = set()
        self._stack: Optional[list] = None

    @property
    def config(self) -> ParserConfig:
        return self._config

    @property
    def handlers(self) -> Mapping[str, HandlerType]:
        return self._handlers

    def feed(self, content: str) -> None:
        """Parse a markup fragment and append its markdown to the buffer."""
        soup = BeautifulSoup(content or "", "html.parser")
        mark = len(self._markdown)
        try:
            self.process_element(soup)
        except RecursionError:
            # A handler recursed through process_element past the limit.
            logger.warning("Markup nested too deeply to convert; keeping plain text")
            del self._markdown[mark:]
            self._markdown.append(soup.get_text())

    def process_element(self, element: Tag) -> None:
        """Process the children of `element` before returning."""
        self._run(lambda: self._schedule_children(element))

    def descend(self, element: Tag, then: Optional[Callable[[], None]] = None) -> None:
        """
        Schedule the children of `element`, then `then`, on the traversal.

        The children are processed after the calling handler returns, so
        anything the handler writes after `descend` lands before them. Put
        closing output in `then`.
        """
        if self._stack is None:
            self.process_element(element)
            if then is not None:
                then()
            return
        if then is not None:
            self._stack.append(then)
        self._schedule_children(element)

    def add_to_markdown(self, text: str) -> None:
        self._markdown.append(text)

    def apply_default(self, element: Tag) -> None:
        """Render `element` with the built-in handler for its tag name."""
        handler = DEFAULT_TAG_HANDLERS.get(element.name.lower())
        if handler is None:
            self.process_element(element)
        else:
            self._run(lambda: self._apply(handler, element))

    def is_headword_tag(self, tag_name: str) -> bool:
        return self._config.transliterate_headwords and tag_name == self._config.headword_tag

    def transliterate(self, text: str) -> str:
        return scripts.convert(text, self._config.from_scheme, self._config.to_scheme)

    @property
    def buffer_size(self) -> int:
        return len(self._markdown)

    def ends_with(self, suffix: str) -> bool:
        return bool(self._markdown) and self._markdown[-1].endswith(suffix)

    def trim_trailing_whitespace(self, since: int = 0) -> None:
        """Strip trailing whitespace from the last fragment written after `since`."""
        if len(self._markdown) > since:
            self._markdown[-1] = self._markdown[-1].rstrip()

    @property
    def markdown(self) -> str:
        """The accumulated markdown with blank lines normalized."""
        return EXCESS_NEWLINES.sub("\n\n", "".join(self._markdown)).strip()

    @property
    def unhandled_tags(self) -> frozenset:
        return frozenset(self._unhandled_tags)

    @property
    def unhandled_tags_list(self) -> list[str]:
        return sorted(self._unhandled_tags)

    def _run(self, start: Callable[[], None]) -> None:
        """Run `start` on a fresh stack and drain it before returning."""
        outer = self._stack
        self._stack = []
        try:
            start()
            self._drain()
        finally:
            self._stack = outer

    def _drain(self) -> None:
        stack = self._stack
        while stack:
            item = stack.pop()
            # Tag is callable, so it has to be matched before the callbacks.
            if isinstance(item, Tag):
                self._process_tag(item)
            elif isinstance(item, PreformattedString):
                # Comments, doctypes, CDATA and processing instructions.
                continue
            elif isinstance(item, NavigableString):
                self._process_text(item)
            elif callable(item):
                item()

    def _schedule_children(self, element: Tag) -> None:
        self._stack.extend(reversed(list(element.children)))

    def _process_text(self, node: NavigableString) -> None:
        text = str(node)
        if not text:
            return
        parent = node.parent
        if parent is not None and parent.name == "blockquote":
            text = text.strip()
            if text:
                self._markdown.append(text)
        else:
            self._markdown.append(text)

    def _process_tag(self, element: Tag) -> None:
        tag_name = element.name.lower()
        handler = self._handlers.get(tag_name)
        if handler is None:
            if tag_name not in self._unhandled_tags:
                logger.debug("Unhandled tag <%s>", tag_name)
            self._unhandled_tags.add(tag_name)
            self._schedule_children(element)
            return
        self._apply(handler, element)

    def _apply(self, handler: HandlerType, element: Tag) -> None:
        if isinstance(handler, str):
            self._markdown.append(handler)
            self.descend(element, then=partial(self.add_to_markdown, handler))
        elif isinstance(handler, TagReplacement):
            self._markdown.append(handler.open)
            self.descend(element, then=partial(self.add_to_markdown, handler.close))
        else:
            handler(element, self)


def looks_like_markup(text: str) -> bool:
    """Check if the text contains anything shaped like a markup tag."""
    return bool(text) and bool(MARKUP_PATTERN.search(text))


class MarkupConverter:
    """Converts dictionary entry markup to markdown."""

    @staticmethod
    def can_handle(text: str) -> bool:
        """Check if the text contains markup tags."""
        return looks_like_markup(text)

    @staticmethod
    def convert(
        content: str,
        dictionary=None,
        key_word: str = "",
        to_scheme: str = scripts.DEVANAGARI,
        custom_handlers: Optional[Mapping] = None,
    ) -> str:
        """
        Convert entry markup to markdown.

        Args:
            content: Raw entry markup.
            dictionary: Source dictionary name; None for generic markup.
            key_word: The entry's headword.
            to_scheme: Scheme Sanskrit headwords are rendered in.
            custom_handlers: Tag handlers overriding or extending the defaults.

        Returns:
            The markdown text.

        Raises:
            UnknownDictionaryError: If `dictionary` is not a known dictionary.
        """
        config = ParserConfig.for_dictionary(dictionary, key_word=key_word, to_scheme=to_scheme)
        parser = LexiconMarkupParser(config, custom_handlers)
        parser.feed(content)
        return parser.markdown


def convert_lexicon_markup(
    content: str,
    dictionary=None,
    key_word: str = "",
    to_scheme: str = scripts.DEVANAGARI,
    custom_handlers: Optional[Mapping] = None,
) -> str:
    """Convert entry markup to markdown. See MarkupConverter.convert."""
    return MarkupConverter.convert(
        content,
        dictionary=dictionary,
        key_word=key_word,
        to_scheme=to_scheme,
        custom_handlers=custom_handlers,
    )


def clean_markup_content(content: str) -> str:
    """Replace non-breaking space entities and collapse whitespace."""
    if not content:
        return ""
    return re.sub(r"\s+", " ", content.replace("&nbsp;", " ")).strip()
