"""Form compilation API.

This module wires the pipeline stages together: template rendering, markup
lexing, tokenization (once per document) and tree building (once per language
variant). Module-level functions cover one-off compilations; FormCompiler
keeps its configuration and statistics across many.
"""

import time
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from polyform.markup import read_events, render, render_string
from polyform.shared import CompilerConfig, FormCompilerError, get_logger
from polyform.tokenization import FormTokenizer, TokenStream
from polyform.tree import Form, FormBuilder

PathLike = Union[str, Path]

MS_PER_SECOND = 1000  # Milliseconds per second conversion


def compile(
    path: PathLike,
    data: Optional[Mapping[str, Any]] = None,
    config: Optional[CompilerConfig] = None,
    correlation_id: Optional[str] = None,
) -> List[Form]:
    """Render and compile a form template file.

    Args:
        path: Path to the template file
        data: Optional context for the template
        config: Compiler configuration
        correlation_id: Optional correlation ID for request tracking

    Returns:
        One Form per language variant: the default language first, then each
        alternate in declaration order

    Raises:
        RenderError: If the template cannot be rendered
        MarkupError: If the rendered markup is not well-formed
        SyntacticError: On the first schema violation in any variant

    Examples:
        >>> forms = compile("contact.xml.j2", {"topics": ["sales", "support"]})
        >>> [form.language for form in forms]
        ['en', 'fr']
    """
    return FormCompiler(config, correlation_id).compile(path, data)


def compile_string(
    source: str,
    data: Optional[Mapping[str, Any]] = None,
    config: Optional[CompilerConfig] = None,
    correlation_id: Optional[str] = None,
) -> List[Form]:
    """Render and compile template source held in memory."""
    return FormCompiler(config, correlation_id).compile_string(source, data)


def compile_markup(
    markup: Union[str, bytes],
    config: Optional[CompilerConfig] = None,
    correlation_id: Optional[str] = None,
) -> List[Form]:
    """Compile already rendered markup, skipping the template stage.

    Examples:
        >>> forms = compile_markup('<form><section name="s1"/></form>')
        >>> forms[0].sections[0].name
        's1'
    """
    return FormCompiler(config, correlation_id).compile_markup(markup)


def compile_tokens(
    stream: TokenStream,
    config: Optional[CompilerConfig] = None,
    correlation_id: Optional[str] = None,
) -> List[Form]:
    """Build every language variant of an existing token stream."""
    return FormCompiler(config, correlation_id).compile_tokens(stream)


class FormCompiler:
    """Configured form compiler for repeated use.

    Attributes:
        config: Compiler configuration
        correlation_id: Correlation ID for request tracking

    Examples:
        >>> compiler = FormCompiler(CompilerConfig().override(tokenizer__strip_text=True))
        >>> forms = compiler.compile("survey.xml.j2")
        >>> compiler.statistics["total_compilations"]
        1
    """

    def __init__(
        self,
        config: Optional[CompilerConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Initialize the compiler.

        Args:
            config: Compiler configuration (defaults to CompilerConfig())
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or CompilerConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "form_compiler")

        self._builder = FormBuilder(
            correlation_id=correlation_id,
            wildcard_language=self.config.tokenizer.wildcard_language,
        )

        self._compilation_count = 0
        self._failed_compilations = 0
        self._variant_count = 0
        self._total_processing_time = 0.0

    def compile(
        self, path: PathLike, data: Optional[Mapping[str, Any]] = None
    ) -> List[Form]:
        """Render a template file and compile the result.

        Raises:
            FormCompilerError: If any stage fails
        """
        start_time = time.time()
        self.logger.info("Starting template compilation", extra={"template": str(path)})

        try:
            markup = render(path, data, self.config.render, self.correlation_id)
            forms = self._compile_rendered(markup)
        except FormCompilerError:
            self._record_failure(start_time, "Template compilation failed",
                                 {"template": str(path)})
            raise

        self._record_success(start_time, forms, "Template compilation completed")
        return forms

    def compile_string(
        self, source: str, data: Optional[Mapping[str, Any]] = None
    ) -> List[Form]:
        """Render template source and compile the result.

        Raises:
            FormCompilerError: If any stage fails
        """
        start_time = time.time()
        self.logger.info(
            "Starting template source compilation", extra={"source_length": len(source)}
        )

        try:
            markup = render_string(source, data, self.config.render)
            forms = self._compile_rendered(markup)
        except FormCompilerError:
            self._record_failure(start_time, "Template source compilation failed")
            raise

        self._record_success(start_time, forms, "Template source compilation completed")
        return forms

    def compile_markup(self, markup: Union[str, bytes]) -> List[Form]:
        """Compile rendered markup.

        Raises:
            MarkupError: If the markup is not well-formed
            SyntacticError: On the first schema violation in any variant
        """
        start_time = time.time()
        self.logger.info("Starting markup compilation", extra={"markup_length": len(markup)})

        try:
            forms = self._compile_rendered(markup)
        except FormCompilerError:
            self._record_failure(start_time, "Markup compilation failed")
            raise

        self._record_success(start_time, forms, "Markup compilation completed")
        return forms

    def tokenize(self, markup: Union[str, bytes]) -> TokenStream:
        """Lex and tokenize rendered markup without building any variant.

        Raises:
            MarkupError: If the markup is not well-formed
        """
        events = read_events(markup, self.correlation_id)
        tokenizer = FormTokenizer(self.config.tokenizer, self.correlation_id)
        return tokenizer.tokenize(events)

    def compile_tokens(self, stream: TokenStream) -> List[Form]:
        """Build one Form per variant language of ``stream``.

        The stream is shared read-only by every build. With
        ``output.single_variant`` set, only the default-language Form is built.

        Raises:
            SyntacticError: On the first schema violation in any variant
        """
        start_time = time.time()
        self.logger.info("Starting token compilation", extra={"token_count": len(stream)})

        try:
            forms = self._build_variants(stream)
        except FormCompilerError:
            self._record_failure(start_time, "Token compilation failed")
            raise

        self._record_success(start_time, forms, "Token compilation completed")
        return forms

    def _build_variants(self, stream: TokenStream) -> List[Form]:
        languages = stream.variant_languages
        if self.config.output.single_variant:
            languages = languages[:1]

        forms = []
        for language in languages:
            try:
                forms.append(self._builder.build(stream, language))
            except FormCompilerError:
                self.logger.for_variant(language).debug(
                    "Variant build failed", extra={"token_count": len(stream)}
                )
                raise

        self.logger.debug(
            "Variants built",
            extra={"languages": languages, "token_count": len(stream)},
        )
        return forms

    def _compile_rendered(self, markup: Union[str, bytes]) -> List[Form]:
        stream = self.tokenize(markup)
        self.logger.info(
            "Tokenization completed",
            extra={
                "token_count": len(stream),
                "language": stream.language,
                "alternates": list(stream.alternates),
            },
        )
        return self._build_variants(stream)

    def _record_success(self, start_time: float, forms: List[Form], message: str) -> None:
        processing_time = (time.time() - start_time) * MS_PER_SECOND
        self._compilation_count += 1
        self._variant_count += len(forms)
        self._total_processing_time += processing_time

        self.logger.info(
            message,
            extra={
                "variant_count": len(forms),
                "languages": [form.language for form in forms],
                "processing_time_ms": processing_time,
            },
        )

    def _record_failure(
        self, start_time: float, message: str, extra: Optional[Dict[str, Any]] = None
    ) -> None:
        processing_time = (time.time() - start_time) * MS_PER_SECOND
        self._compilation_count += 1
        self._failed_compilations += 1
        self._total_processing_time += processing_time

        self.logger.error(message, extra={**(extra or {}),
                                          "processing_time_ms": processing_time})

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get compiler usage statistics.

        Returns:
            Dictionary with compilation counts and timings
        """
        successful = self._compilation_count - self._failed_compilations
        return {
            "total_compilations": self._compilation_count,
            "successful_compilations": successful,
            "failed_compilations": self._failed_compilations,
            "variants_built": self._variant_count,
            "total_processing_time_ms": self._total_processing_time,
            "average_processing_time_ms": (
                self._total_processing_time / self._compilation_count
                if self._compilation_count > 0 else 0.0
            ),
            "correlation_id": self.correlation_id,
        }

    def reset_statistics(self) -> None:
        """Reset compiler usage statistics."""
        self._compilation_count = 0
        self._failed_compilations = 0
        self._variant_count = 0
        self._total_processing_time = 0.0

        self.logger.info("Compiler statistics reset")
