from enum import Enum


class WeightStatus(str, Enum):
    """
    How a product is sold.

    PIECE products are counted in units ("шт"), BY_WEIGHT products are measured
    in kilograms ("кг") and may carry fractional quantities.
    """

    PIECE = "поштучно"
    BY_WEIGHT = "на развес"

    @property
    def unit(self) -> str:
        return "кг" if self == WeightStatus.BY_WEIGHT else "шт"

    @classmethod
    def from_string(cls, value: str | None) -> 'WeightStatus':
        if not value:
            return cls.PIECE
        # "по штучно" is a spelling variant seen in hand-edited bases
        normalized = value.strip().lower().replace("по штучно", "поштучно")
        if normalized == cls.BY_WEIGHT.value:
            return cls.BY_WEIGHT
        return cls.PIECE
