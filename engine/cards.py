"""Card catalog for Lotería."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional, Sequence


@dataclass(frozen=True)
class Card:
    """Immutable representation of a Lotería card."""

    id: int
    name: str
    riddle: str
    image_ref: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        if not self.image_ref:
            object.__setattr__(self, "image_ref", f"card_{self.id}")


_CATALOG_ROWS: list[tuple[int, str, str]] = [
    (1, "El Gallo", "El que le cantó a San Pedro"),
    (2, "El Diablito", "Portate bien, cuatito"),
    (3, "La Dama", "Puliendo el paso por toda la calle"),
    (4, "El Catrín", "Don Ferruco en la alameda"),
    (5, "El Paraguas", "Para el sol y la lluvia"),
    (6, "La Sirena", "Con los encantos del mar"),
    (7, "La Escalera", "Las mujeres suben, los hombres bajan"),
    (8, "La Botella", "La que no debe caer"),
    (9, "El Barril", "Tanto bebió el cantinero"),
    (10, "El Árbol", "El que a tu abuelo dio sombra"),
    (11, "El Melón", "Me lo das o me lo quitas"),
    (12, "El Valiente", "Porque al cobarde no se le hace"),
    (13, "El Gorrito", "Ponmelo y te lo quito"),
    (14, "La Muerte", "La que a todos se los lleva"),
    (15, "La Pera", "El que espera desespera"),
    (16, "La Bandera", "Verde, blanco y colorado"),
    (17, "El Bandolón", "Tocando su bandolón"),
    (18, "El Violoncello", "Creciendo se fue hasta el cielo"),
    (19, "La Garza", "Al otro lado del río"),
    (20, "El Pájaro", "Tu que vuelas como él"),
    (21, "La Mano", "La del metate"),
    (22, "La Bota", "Una es de ida y otra de venida"),
    (23, "La Luna", "El farol de los enamorados"),
    (24, "El Cotorro", "Ave de mal agüero"),
    (25, "El Borracho", "A ver si como no puede dejar de tomar"),
    (26, "El Negrito", "El que se comió el azúcar"),
    (27, "El Corazón", "No me extrañes corazón"),
    (28, "La Sandía", "La barriga que Juan tenía"),
    (29, "El Tambor", "No te arrugues, cuero viejo"),
    (30, "El Camarón", "Camarón que se duerme"),
    (31, "Las Jaras", "Las que florecen en mayo"),
    (32, "El Músico", "El que vive de serenata"),
    (33, "La Araña", "Atarántamela a palos"),
    (34, "El Soldado", "Uno, dos y tres"),
    (35, "La Estrella", "La guía de los marineros"),
    (36, "El Cazo", "El que sirve la olla"),
    (37, "El Mundo", "Este mundo es una bola"),
    (38, "El Apache", "¡Ah Chihuahua, cuánto apache!"),
    (39, "El Nopal", "Metate de mexicanos"),
    (40, "El Alacrán", "El que pica a los malvados"),
    (41, "La Rosa", "Rosita, Rosaura, del jardín eres señora"),
    (42, "La Calavera", "Al pasar por el panteón"),
    (43, "La Campana", "Tú con la campana y yo con el badajo"),
    (44, "El Cantarito", "Tanto va el cántaro al agua"),
    (45, "El Venado", "Saltando va buscando"),
    (46, "El Sol", "La cobija de los pobres"),
    (47, "La Corona", "Las espinas de una flor"),
    (48, "La Chalupa", "Rema que rema Lupita"),
    (49, "El Pino", "Fresco y oloroso"),
    (50, "El Pescado", "El que por la boca muere"),
    (51, "La Palma", "Palmero, súbete a la palma"),
    (52, "La Maceta", "El que nace pa' tamal"),
    (53, "El Arpa", "Arpa vieja de mi suegra"),
    (54, "La Rana", "Al ver que no puedes, saltas"),
]

# The 54 traditional cards, ordered by id.
CATALOG: tuple[Card, ...] = tuple(Card(card_id, name, riddle) for card_id, name, riddle in _CATALOG_ROWS)

CATALOG_SIZE = len(CATALOG)

_BY_ID: dict[int, Card] = {card.id: card for card in CATALOG}


_BY_NAME: dict[str, Card] = {card.name.casefold(): card for card in CATALOG}


def card_by_id(card_id: int) -> Optional[Card]:
    return _BY_ID.get(card_id)


def card_by_name(name: str) -> Optional[Card]:
    return _BY_NAME.get(name.strip().casefold())


def contains_card(cards: Iterable[Card], card: Card) -> bool:
    """Return True if a card with the same id is present in ``cards``."""
    return any(candidate.id == card.id for candidate in cards)


def serialize_card(card: Card) -> dict[str, object]:
    return {"id": card.id, "name": card.name, "riddle": card.riddle, "image": card.image_ref}


def deserialize_card(payload: Mapping[str, object]) -> Card:
    card = card_by_id(int(payload["id"]))
    if card is None:
        raise KeyError(f"Unknown card id: {payload['id']!r}")
    return card


def card_label(card: Card) -> str:
    return f"#{card.id} {card.name}"


def announcement_text(card: Card, *, with_riddle: bool = False) -> str:
    """Text a caller shouts for a card: ``¡El Gallo!`` or the riddle first."""
    if with_riddle:
        return f"{card.riddle}. ¡{card.name}!"
    return f"¡{card.name}!"


def card_ids(cards: Sequence[Card]) -> list[int]:
    return [card.id for card in cards]
