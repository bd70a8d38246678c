"""
Filter formula builder for the remote records API.

Formulas are small expression trees: each node renders to the formula language
the API understands (`str(node)`) and can also evaluate itself against a raw
record (`node.matches(record)`), so the same expression drives both the query
string and in-memory filtering.

Only the subset the repositories need is supported:
    field_equals("статус", "принят")       -> {статус} = "принят"
    and_(a, b), or_(a, b), not_(a)         -> AND(a, b), OR(a, b), NOT(a)
    is_empty("работники")                  -> NOT({работники})
    find_in_linked("Table 1", "recX")      -> FIND("recX", ARRAYJOIN({Table 1}))
    record_id_in(["recA", "recB"])         -> OR(RECORD_ID() = "recA", RECORD_ID() = "recB")
"""


def quote(value) -> str:
    """Render a value as a formula literal."""
    if isinstance(value, bool):
        return "TRUE()" if value else "FALSE()"
    if isinstance(value, (int, float)):
        return repr(value)
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def field_ref(field: str) -> str:
    return "{" + field.replace("}", "\\}") + "}"


def _field_value(record: dict, field: str):
    return (record.get("fields") or {}).get(field)


def _as_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return ",".join(_as_text(v) for v in value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class Formula:
    def matches(self, record: dict) -> bool:
        raise NotImplementedError

    def render(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.render()!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Formula) and self.render() == other.render()

    def __hash__(self) -> int:
        return hash(self.render())


class FieldEquals(Formula):
    def __init__(self, field: str, value):
        self.field = field
        self.value = value

    def render(self) -> str:
        return f"{field_ref(self.field)} = {quote(self.value)}"

    def matches(self, record: dict) -> bool:
        return _as_text(_field_value(record, self.field)) == _as_text(self.value)


class IsEmpty(Formula):
    def __init__(self, field: str):
        self.field = field

    def render(self) -> str:
        return f"NOT({field_ref(self.field)})"

    def matches(self, record: dict) -> bool:
        value = _field_value(record, self.field)
        return value in (None, "", [], 0, False)


class FindInLinked(Formula):
    def __init__(self, field: str, needle: str):
        self.field = field
        self.needle = needle

    def render(self) -> str:
        return f"FIND({quote(self.needle)}, ARRAYJOIN({field_ref(self.field)}))"

    def matches(self, record: dict) -> bool:
        return self.needle in _as_text(_field_value(record, self.field))


class RecordIdIs(Formula):
    def __init__(self, record_id: str):
        self.record_id = record_id

    def render(self) -> str:
        return f"RECORD_ID() = {quote(self.record_id)}"

    def matches(self, record: dict) -> bool:
        return record.get("id") == self.record_id


class Not(Formula):
    def __init__(self, inner: Formula):
        self.inner = inner

    def render(self) -> str:
        return f"NOT({self.inner.render()})"

    def matches(self, record: dict) -> bool:
        return not self.inner.matches(record)


class And(Formula):
    def __init__(self, *parts: Formula):
        self.parts = parts

    def render(self) -> str:
        return "AND(" + ", ".join(p.render() for p in self.parts) + ")"

    def matches(self, record: dict) -> bool:
        return all(p.matches(record) for p in self.parts)


class Or(Formula):
    def __init__(self, *parts: Formula):
        self.parts = parts

    def render(self) -> str:
        return "OR(" + ", ".join(p.render() for p in self.parts) + ")"

    def matches(self, record: dict) -> bool:
        return any(p.matches(record) for p in self.parts)


def field_equals(field: str, value) -> Formula:
    return FieldEquals(field, value)


def and_(*parts: Formula) -> Formula:
    return And(*parts)


def or_(*parts: Formula) -> Formula:
    return Or(*parts)


def not_(inner: Formula) -> Formula:
    return Not(inner)


def is_empty(field: str) -> Formula:
    return IsEmpty(field)


def not_empty(field: str) -> Formula:
    return Not(IsEmpty(field))


def find_in_linked(field: str, needle: str) -> Formula:
    return FindInLinked(field, needle)


def record_id_in(record_ids) -> Formula:
    """
    Match any of the given record ids.

    An empty id list yields a formula matching nothing, so callers can pass
    the result straight to a list call.
    """
    ids = list(dict.fromkeys(record_ids))
    if not ids:
        return Or(RecordIdIs(""))
    return Or(*(RecordIdIs(record_id) for record_id in ids))
