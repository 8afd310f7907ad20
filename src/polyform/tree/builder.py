"""Form tree builder.

This module walks an immutable token sequence and builds one Form for one
target language. Containers are held in one open slot per kind (section,
group, field, option) and attached to their parent when their end token is
consumed. The builder keeps every piece of per-call state in a fresh
_BuildContext, so the same token sequence can be built for any number of
languages, in any order or concurrently, without interference.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Sequence, Set, Tuple, Union

from polyform.shared.errors import (
    ImproperNesting,
    MismatchedTags,
    OrphanElement,
)
from polyform.shared.logging import get_logger
from polyform.tokenization import Token, TokenStream, TokenType

from .model import Field, FieldOption, Form, Group, Section

END_OF_DOCUMENT = "end of document"


class LanguageMatch(Enum):
    """How a token's language relates to the target language."""

    NONE = auto()       # Excluded from this variant
    PRIMARY = auto()    # Unrestricted or exactly the target language
    FALLBACK = auto()   # Default-language text used until a translation appears


def language_match(token: Token, target_language: Optional[str]) -> LanguageMatch:
    """Decide whether a text token applies under ``target_language``.

    Pure function of its arguments; nothing is cached between calls.
    """
    if token.lang is None or token.lang == target_language:
        return LanguageMatch.PRIMARY
    if token.inherited_language:
        return LanguageMatch.FALLBACK
    return LanguageMatch.NONE


@dataclass
class _BuildContext:
    """Mutable state of one build call."""

    form: Form
    target_language: Optional[str]
    section: Optional[Section] = None
    group: Optional[Group] = None
    form_field: Optional[Field] = None
    option: Optional[FieldOption] = None
    skipping_option: bool = False
    # (id(container), attribute) pairs written by a PRIMARY token
    primary_slots: Set[Tuple[int, str]] = field(default_factory=set)

    def innermost_open(self) -> Optional[str]:
        if self.option is not None or self.skipping_option:
            return "option"
        if self.form_field is not None:
            return "field"
        if self.group is not None:
            return "group"
        if self.section is not None:
            return "section"
        return None


class FormBuilder:
    """Builds Form trees from token sequences, one language variant per call."""

    def __init__(
        self,
        correlation_id: Optional[str] = None,
        wildcard_language: str = "*",
    ) -> None:
        """Initialize the form builder.

        Args:
            correlation_id: Optional correlation ID for log messages
            wildcard_language: ``lang`` value on an option meaning every language
        """
        self.correlation_id = correlation_id
        self.wildcard_language = wildcard_language
        self.logger = get_logger(__name__, correlation_id, "form_builder")

    def build(
        self,
        tokens: Union[TokenStream, Sequence[Token]],
        target_language: Optional[str] = None,
    ) -> Form:
        """Build the Form for one target language.

        Args:
            tokens: TokenStream or plain token sequence; never modified
            target_language: Language of the variant to build

        Returns:
            Completed Form

        Raises:
            SyntacticError: On the first structural or attribute violation
        """
        token_list = tokens.tokens if isinstance(tokens, TokenStream) else tokens
        logger = self.logger.for_variant(target_language)
        ctx = _BuildContext(form=Form(language=target_language),
                            target_language=target_language)

        for token in token_list:
            self._process_token(ctx, token)

        open_kind = ctx.innermost_open()
        if open_kind is not None:
            raise MismatchedTags(END_OF_DOCUMENT, open_kind)

        logger.debug(
            "Form variant built",
            extra={"token_count": len(token_list), "section_count": len(ctx.form.sections)},
        )
        return ctx.form

    def _process_token(self, ctx: _BuildContext, token: Token) -> None:
        token_type = token.type

        if ctx.skipping_option:
            self._process_skipped_option_token(ctx, token)
        elif token_type is TokenType.SECTION_START:
            self._open_section(ctx, token)
        elif token_type is TokenType.GROUP_START:
            self._open_group(ctx, token)
        elif token_type is TokenType.FIELD_START:
            self._open_field(ctx, token)
        elif token_type is TokenType.OPTION_START:
            self._open_option(ctx, token)
        elif token_type is TokenType.SECTION_END:
            self._close_section(ctx)
        elif token_type is TokenType.GROUP_END:
            self._close_group(ctx)
        elif token_type is TokenType.FIELD_END:
            self._close_field(ctx)
        elif token_type is TokenType.OPTION_END:
            self._close_option(ctx)
        elif token_type is TokenType.IMPLICIT_LABEL:
            self._apply_implicit_label(ctx, token)
        elif token_type is TokenType.UNLISTED:
            ctx.form.unlisted = True
        elif token_type is TokenType.INDEX:
            ctx.form.index = token.number
        elif token_type is TokenType.LINK:
            ctx.form.link = token.text
        elif token_type is TokenType.SCRIPT:
            ctx.form.embedded_scripts.append(token.text)
        elif token_type is TokenType.STYLE:
            ctx.form.stylesheet = token.text
        else:
            self._apply_language_text(ctx, token)

    # Containers

    def _open_section(self, ctx: _BuildContext, token: Token) -> None:
        open_kind = ctx.innermost_open()
        if open_kind is not None:
            raise ImproperNesting(f"section found inside an open {open_kind}")
        ctx.section = Section.from_attributes(token.attributes)

    def _open_group(self, ctx: _BuildContext, token: Token) -> None:
        if ctx.group is not None or ctx.form_field is not None or ctx.option is not None:
            raise ImproperNesting(
                f"group found inside an open {ctx.innermost_open()}"
            )
        ctx.group = Group.from_attributes(token.attributes)

    def _open_field(self, ctx: _BuildContext, token: Token) -> None:
        if ctx.form_field is not None or ctx.option is not None:
            raise ImproperNesting(
                f"field found inside an open {ctx.innermost_open()}"
            )
        ctx.form_field = Field.from_attributes(token.attributes)

    def _open_option(self, ctx: _BuildContext, token: Token) -> None:
        if ctx.option is not None:
            raise ImproperNesting("option found inside an open option")
        option = FieldOption.from_attributes(token.attributes)

        lang = token.get_attribute("lang")
        if lang is None or lang == self.wildcard_language or lang == ctx.target_language:
            ctx.option = option
        else:
            ctx.skipping_option = True
            if self.logger.is_enabled_for(logging.DEBUG):
                self.logger.for_variant(ctx.target_language).debug(
                    "Skipping option for another language",
                    extra={"option": option.name, "option_language": lang},
                )

    def _process_skipped_option_token(self, ctx: _BuildContext, token: Token) -> None:
        """Consume tokens inside an option excluded from this variant."""
        if token.type is TokenType.OPTION_END:
            ctx.skipping_option = False
        elif token.is_container_start:
            raise ImproperNesting(
                f"{token.type.name.split('_')[0].lower()} found inside an open option"
            )

    def _close_section(self, ctx: _BuildContext) -> None:
        section = ctx.section
        if section is None or ctx.group is not None or ctx.form_field is not None:
            raise MismatchedTags("section", ctx.innermost_open())
        ctx.section = None
        ctx.form.sections.append(section)

    def _close_group(self, ctx: _BuildContext) -> None:
        group = ctx.group
        if group is None or ctx.form_field is not None:
            raise MismatchedTags("group", ctx.innermost_open())
        ctx.group = None
        if ctx.section is None:
            raise OrphanElement("group found without a parent section")
        ctx.section.elements.append(group)

    def _close_field(self, ctx: _BuildContext) -> None:
        form_field = ctx.form_field
        if form_field is None or ctx.option is not None:
            raise MismatchedTags("field", ctx.innermost_open())
        ctx.form_field = None
        if ctx.group is not None:
            ctx.group.members.append(form_field)
        elif ctx.section is not None:
            ctx.section.elements.append(form_field)
        else:
            raise OrphanElement("field found without a parent section or group")

    def _close_option(self, ctx: _BuildContext) -> None:
        option = ctx.option
        if option is None:
            raise MismatchedTags("option", ctx.innermost_open())
        ctx.option = None
        if ctx.form_field is None:
            raise OrphanElement("option found without field parent")
        ctx.form_field.options.append(option)

    # Text

    def _apply_implicit_label(self, ctx: _BuildContext, token: Token) -> None:
        """Use trailing container text as label or title when none was given."""
        if ctx.option is not None:
            target, attribute = ctx.option, "label"
        elif ctx.form_field is not None:
            target, attribute = ctx.form_field, "label"
        elif ctx.group is not None:
            target, attribute = ctx.group, "title"
        elif ctx.section is not None:
            target, attribute = ctx.section, "title"
        else:
            return

        if getattr(target, attribute) is None:
            setattr(target, attribute, token.text)

    def _apply_language_text(self, ctx: _BuildContext, token: Token) -> None:
        match = language_match(token, ctx.target_language)
        if match is LanguageMatch.NONE:
            return

        form = ctx.form
        token_type = token.type
        if token_type is TokenType.DESCRIPTION:
            self._assign(ctx, form, "description", token.text, match)
            self._assign(ctx, form, "meta_description", token.text, match)
            self._assign(ctx, form, "dir_description", token.text, match)
        elif token_type is TokenType.META_DESCRIPTION:
            self._assign(ctx, form, "meta_description", token.text, match)
        elif token_type is TokenType.DIR_DESCRIPTION:
            self._assign(ctx, form, "dir_description", token.text, match)
        elif token_type is TokenType.CATEGORY:
            self._assign(ctx, form, "category", token.text, match)
        elif token_type is TokenType.KEYWORDS:
            self._assign(ctx, form, "keywords", token.text, match)
        elif token_type is TokenType.INSTRUCTIONS:
            target = ctx.form_field or ctx.group or ctx.section or form
            self._assign(ctx, target, "instructions", token.text, match)
        elif token_type is TokenType.TITLE:
            target = ctx.group or ctx.section or form
            self._assign(ctx, target, "title", token.text, match)
        elif token_type is TokenType.LABEL:
            label_target = ctx.option or ctx.form_field
            if label_target is None:
                self.logger.for_variant(ctx.target_language).debug(
                    "Ignoring label outside of a field or option"
                )
                return
            self._assign(ctx, label_target, "label", token.text, match)

    @staticmethod
    def _assign(
        ctx: _BuildContext,
        target: object,
        attribute: str,
        value: Optional[str],
        match: LanguageMatch,
    ) -> None:
        """Write a text slot; later tokens win, but a fallback never replaces a primary."""
        slot = (id(target), attribute)
        if match is LanguageMatch.PRIMARY:
            ctx.primary_slots.add(slot)
        elif slot in ctx.primary_slots:
            return
        setattr(target, attribute, value)
