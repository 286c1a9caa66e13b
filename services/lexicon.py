"""
lexicon.py
----------

Static word lists used by the local sentiment engine. The lexicon is
Spanish only and is built once at import time; every analysis shares
the same immutable instance.

Matching against positive and negative entries is done by substring
containment on a cleaned token, so an entry such as ``"bueno"`` also
flags ``"buenos"``. Negators and intensifiers, on the other hand, only
match exact tokens. Entries of the negative list that contain a space
are treated as multi-word phrases and are searched in the normalized
text instead of being matched token by token.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Tuple


@dataclass(frozen=True)
class Lexicon:
    """Immutable bundle of word lists for the heuristic engine."""

    positive: Tuple[str, ...]
    negative: Tuple[str, ...]
    intensifiers: FrozenSet[str]
    negators: FrozenSet[str]
    negative_words: Tuple[str, ...] = field(init=False)
    negative_phrases: Tuple[str, ...] = field(init=False)

    def __post_init__(self) -> None:
        # Split the negative list once instead of on every token
        object.__setattr__(
            self, "negative_words", tuple(w for w in self.negative if " " not in w)
        )
        object.__setattr__(
            self, "negative_phrases", tuple(w for w in self.negative if " " in w)
        )

    @classmethod
    def build(
        cls,
        *,
        positive: Iterable[str],
        negative: Iterable[str],
        intensifiers: Iterable[str],
        negators: Iterable[str],
    ) -> "Lexicon":
        return cls(
            positive=tuple(positive),
            negative=tuple(negative),
            intensifiers=frozenset(intensifiers),
            negators=frozenset(negators),
        )

    def is_negator(self, token: str) -> bool:
        return token in self.negators

    def is_intensifier(self, token: str) -> bool:
        return token in self.intensifiers

    def is_positive(self, token: str) -> bool:
        """True when any positive entry occurs inside ``token``."""
        return any(word in token for word in self.positive)

    def is_negative(self, token: str) -> bool:
        """True when any single-word negative entry occurs inside ``token``."""
        return any(word in token for word in self.negative_words)


SPANISH_LEXICON = Lexicon.build(
    positive=[
        "feliz", "alegre", "excelente", "bueno", "genial", "perfecto", "increíble",
        "maravilloso", "fantástico", "hermoso", "amor", "encanta", "gustar", "éxito",
        "victoria", "ganar", "mejor", "contento", "satisfecho", "positivo", "bien",
        "agradecido", "afortunado", "sonrisa", "risa", "diversión", "esperanza",
        "optimista", "brillante", "espectacular", "extraordinario", "fascinante",
        "estupendo", "magnífico", "sobresaliente", "encantador", "admirable",
        "recomendable", "útil", "valioso", "eficiente", "efectivo", "logro", "felicidad",
    ],
    negative=[
        "triste", "malo", "terrible", "horrible", "pésimo", "odio", "molesto",
        "enojado", "frustrado", "decepcionado", "dolor", "sufrimiento", "problema",
        "error", "fallo", "perder", "pérdida", "peor", "difícil", "negativo",
        "deprimente", "aburrido", "cansado", "enfermo", "preocupado", "miedo",
        "ansiedad", "desastre", "fracaso", "lamentable", "insoportable", "mierda",
        "porquería", "basura", "asco", "disgusto", "desagradable", "inútil",
        "deficiente", "defectuoso", "feo", "detestable", "patético", "miserable",
        # colloquial insults
        "jueputa", "perra", "maldito", "triplejuputa", "cabronazo", "chingada",
        "chingar", "pinche", "culero", "culiada", "zorra", "puta",
        "hijo de la gran puta",
    ],
    intensifiers=[
        "muy", "demasiado", "extremadamente", "súper", "super", "ultra", "totalmente",
        "completamente", "absolutamente", "increíblemente", "bastante", "realmente",
        "verdaderamente", "sumamente", "altamente", "excesivamente",
    ],
    negators=[
        "no", "nunca", "jamás", "jamas", "tampoco", "ningún", "ningun", "ninguno", "nada", "nadie",
    ],
)


__all__ = ["Lexicon", "SPANISH_LEXICON"]
