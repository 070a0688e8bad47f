from __future__ import annotations

"""
A minimal pygls-based Language Server for Luna.

Features:
- Text synchronization and document store
- Diagnostics: lex and read errors with their exact ranges
- Hover: builtin signatures and docs, special forms, top-level definitions
- Completion: builtins, special forms, top-level definitions
- Signature Help: for builtins
- Document Symbols: from the indexer

Note: We avoid evaluating the buffer. We build a static index per document.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from lsprotocol.types import (
    TEXT_DOCUMENT_COMPLETION,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_CLOSE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_DOCUMENT_SYMBOL,
    TEXT_DOCUMENT_HOVER,
    TEXT_DOCUMENT_SIGNATURE_HELP,
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    CompletionOptions,
    CompletionParams,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidCloseTextDocumentParams,
    DidOpenTextDocumentParams,
    DocumentSymbol,
    DocumentSymbolParams,
    Hover,
    HoverParams,
    MarkupContent,
    MarkupKind,
    ParameterInformation,
    Position,
    Range,
    SignatureHelp,
    SignatureHelpOptions,
    SignatureHelpParams,
    SignatureInformation,
    SymbolKind,
)
from pygls.server import LanguageServer

from luna import __version__
from luna_lsp.indexer import (
    BUILTIN_DOCS,
    BUILTIN_SIGNATURES,
    SPECIAL_FORM_NAMES,
    DocumentIndex,
    build_index,
    callee_before,
    line_prefix,
    word_at,
)

logger = logging.getLogger(__name__)


@dataclass
class DocumentState:
    text: str
    index: DocumentIndex


class LunaLanguageServer(LanguageServer):
    CMD_NAME = "luna-ls"

    def __init__(self):
        super().__init__(self.CMD_NAME, __version__)
        self.documents: Dict[str, DocumentState] = {}


ls = LunaLanguageServer()


# --- Text sync ---
def _update(uri: str, text: str) -> None:
    idx = build_index(text)
    ls.documents[uri] = DocumentState(text=text, index=idx)
    ls.publish_diagnostics(uri, diagnostics_for(idx))


@ls.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(params: DidOpenTextDocumentParams):
    logger.debug("opened %s", params.text_document.uri)
    _update(params.text_document.uri, params.text_document.text or "")


@ls.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(params: DidChangeTextDocumentParams):
    uri = params.text_document.uri
    # pygls has already applied the edits to its workspace copy.
    document = ls.workspace.get_text_document(uri)
    _update(uri, document.source)


@ls.feature(TEXT_DOCUMENT_DID_CLOSE)
def did_close(params: DidCloseTextDocumentParams):
    uri = params.text_document.uri
    logger.debug("closed %s", uri)
    ls.documents.pop(uri, None)
    ls.publish_diagnostics(uri, [])


# --- Diagnostics ---
def diagnostics_for(idx: DocumentIndex) -> List[Diagnostic]:
    diags: List[Diagnostic] = []
    for problem in idx.problems:
        diags.append(
            Diagnostic(
                range=Range(
                    start=Position(line=problem.start[0], character=problem.start[1]),
                    end=Position(line=problem.end[0], character=problem.end[1]),
                ),
                message=problem.message,
                # Unfinished text is usually just not typed yet.
                severity=DiagnosticSeverity.Warning if problem.incomplete else DiagnosticSeverity.Error,
                source=LunaLanguageServer.CMD_NAME,
            )
        )
    return diags


# --- Hover ---
def hover_text(word: str, idx: DocumentIndex) -> Optional[str]:
    if word in BUILTIN_SIGNATURES:
        sig = BUILTIN_SIGNATURES[word]
        doc = BUILTIN_DOCS[word]
        return f"{sig}\n\n{doc}" if doc else sig
    if word in SPECIAL_FORM_NAMES:
        return f"{word}: special form"
    sdef = idx.symbols.get(word)
    if sdef is not None:
        return f"{word}: {sdef.kind} (defined at {sdef.line + 1}:{sdef.col + 1})"
    return None


@ls.feature(TEXT_DOCUMENT_HOVER)
def on_hover(params: HoverParams) -> Optional[Hover]:
    state = ls.documents.get(params.text_document.uri)
    if not state:
        return None
    word = word_at(state.text, params.position.line, params.position.character)
    if not word:
        return None
    contents = hover_text(word, state.index)
    if contents is None:
        return None
    return Hover(contents=MarkupContent(kind=MarkupKind.PlainText, value=contents))


# --- Completion ---
@ls.feature(TEXT_DOCUMENT_COMPLETION, CompletionOptions(trigger_characters=["("]))
def on_completion(params: CompletionParams) -> CompletionList:
    state = ls.documents.get(params.text_document.uri)
    items: List[CompletionItem] = []
    for name in SPECIAL_FORM_NAMES:
        items.append(CompletionItem(label=name, kind=CompletionItemKind.Keyword))
    for name, sig in BUILTIN_SIGNATURES.items():
        items.append(CompletionItem(label=name, kind=CompletionItemKind.Function, detail=sig))
    if state:
        for name, sdef in state.index.symbols.items():
            kind = CompletionItemKind.Function if sdef.kind == "function" else CompletionItemKind.Variable
            items.append(CompletionItem(label=name, kind=kind))
    return CompletionList(is_incomplete=False, items=items)


# --- Signature Help ---
@ls.feature(TEXT_DOCUMENT_SIGNATURE_HELP, SignatureHelpOptions(trigger_characters=["(", " "]))
def on_signature_help(params: SignatureHelpParams) -> Optional[SignatureHelp]:
    state = ls.documents.get(params.text_document.uri)
    if not state:
        return None
    callee = callee_before(line_prefix(state.text, params.position.line, params.position.character))
    sig = BUILTIN_SIGNATURES.get(callee) if callee else None
    if not sig:
        return None

    params_list = sig[1:-1].split()[1:]
    parameters = [ParameterInformation(label=p) for p in params_list]
    return SignatureHelp(
        signatures=[SignatureInformation(label=sig, parameters=parameters)],
        active_signature=0,
        active_parameter=0,
    )


# --- Document Symbols ---
@ls.feature(TEXT_DOCUMENT_DOCUMENT_SYMBOL)
def on_document_symbols(params: DocumentSymbolParams) -> Optional[List[DocumentSymbol]]:
    state = ls.documents.get(params.text_document.uri)
    if not state:
        return None
    symbols: List[DocumentSymbol] = []
    for name, sdef in state.index.symbols.items():
        rng = Range(
            start=Position(line=sdef.line, character=sdef.col),
            end=Position(line=sdef.line, character=sdef.col + len(name)),
        )
        symbols.append(
            DocumentSymbol(
                name=name,
                kind=SymbolKind.Function if sdef.kind == "function" else SymbolKind.Variable,
                range=rng,
                selection_range=rng,
            )
        )
    return symbols
