# utils/difficulty_tree.py

"""
Нормализация дерева сложностей мода.

Форма отправки/отображения: список, где элемент - либо имя родительской
сложности без детей, либо список [родитель, ребёнок1, ребёнок2, ...].

    ["Easy", ["Medium", "Medium+"], "Hard"]

Order родителя = позиция во внешнем списке (с 1), order ребёнка = позиция
во внутреннем списке после имени родителя (с 1).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Tuple, Union

from core.exceptions import (
    CorruptDifficultyTree,
    InvalidMapDifficulty,
    MalformedDifficultySubmission,
    NonContiguousOrderError,
)

DifficultyName = Union[str, List[str]]


@dataclass
class ChildDifficultyCreate:
    name: str
    order: int


@dataclass
class ParentDifficultyCreate:
    name: str
    order: int
    children: List[ChildDifficultyCreate] = field(default_factory=list)


class ParsedDifficulties(NamedTuple):
    names: List[str]
    creation: List[ParentDifficultyCreate]
    has_sub_difficulties: bool


def _check_name(name: Any, seen: set, scope: str) -> str:
    if not isinstance(name, str):
        raise MalformedDifficultySubmission(f"{scope}: difficulty names must be strings, got {name!r}")
    if not name.strip():
        raise MalformedDifficultySubmission(f"{scope}: difficulty names must not be blank")
    if name in seen:
        raise MalformedDifficultySubmission(f"{scope}: duplicate difficulty name '{name}'")
    seen.add(name)
    return name


def parse_difficulty_submission(submission: Any) -> ParsedDifficulties:
    """Список сложностей из запроса -> (плоские имена, структура для создания, есть ли под-сложности)"""
    if not isinstance(submission, (list, tuple)) or not submission:
        raise MalformedDifficultySubmission("difficulties must be a non-empty list")

    names: List[str] = []
    creation: List[ParentDifficultyCreate] = []
    has_sub_difficulties = False
    parent_names: set = set()

    for parent_index, element in enumerate(submission, start=1):
        if isinstance(element, str):
            name = _check_name(element, parent_names, "parent difficulties")
            creation.append(ParentDifficultyCreate(name=name, order=parent_index))
            names.append(name)
            continue

        if not isinstance(element, (list, tuple)):
            raise MalformedDifficultySubmission(
                f"element {parent_index} must be a name or a list of names, got {element!r}"
            )
        if len(element) < 2:
            raise MalformedDifficultySubmission(
                f"element {parent_index} must contain a parent name and at least one sub-difficulty"
            )

        has_sub_difficulties = True
        parent_name = _check_name(element[0], parent_names, "parent difficulties")
        parent = ParentDifficultyCreate(name=parent_name, order=parent_index)
        names.append(parent_name)

        sibling_names: set = set()
        for child_index, child_name in enumerate(element[1:], start=1):
            child_name = _check_name(child_name, sibling_names, f"sub-difficulties of '{parent_name}'")
            parent.children.append(ChildDifficultyCreate(name=child_name, order=child_index))
            names.append(child_name)

        creation.append(parent)

    return ParsedDifficulties(names, creation, has_sub_difficulties)


def creation_to_names(creation: Iterable[ParentDifficultyCreate]) -> List[DifficultyName]:
    """Структура для создания -> форма отображения (без обращения к БД)"""
    result: List[DifficultyName] = []
    for parent in sorted(creation, key=lambda p: p.order):
        if parent.children:
            children = sorted(parent.children, key=lambda c: c.order)
            result.append([parent.name] + [c.name for c in children])
        else:
            result.append(parent.name)
    return result


def _ordered_names(rows: List[Any], mod_id: Optional[int], parent_name: Optional[str] = None) -> List[Any]:
    # Линейный поиск по order, n маленькое
    ordered = []
    for order in range(1, len(rows) + 1):
        match = next((row for row in rows if row.order == order), None)
        if match is None:
            raise NonContiguousOrderError(mod_id, parent_name)
        ordered.append(match)
    return ordered


def sort_difficulty_names(rows: Iterable[Any], mod_id: Optional[int] = None) -> List[DifficultyName]:
    """
    Строки сложностей из БД (в любом порядке) -> форма отображения.

    Каждая строка должна иметь id, name, order и parent_difficulty_id.
    Дыра в порядках -> NonContiguousOrderError, а не тихий пропуск.
    """
    parents: List[Any] = []
    children_by_parent: Dict[int, List[Any]] = {}

    for row in rows:
        if row.parent_difficulty_id is None:
            parents.append(row)
        else:
            children_by_parent.setdefault(row.parent_difficulty_id, []).append(row)

    parent_ids = {parent.id for parent in parents}
    orphans = [pid for pid in children_by_parent if pid not in parent_ids]
    if orphans:
        raise CorruptDifficultyTree(
            f"Sub-difficulties of mod {mod_id} reference unknown parent difficulties {sorted(orphans)}"
        )

    result: List[DifficultyName] = []
    for parent in _ordered_names(parents, mod_id):
        siblings = children_by_parent.get(parent.id)
        if not siblings:
            result.append(parent.name)
            continue
        ordered_children = _ordered_names(siblings, mod_id, parent.name)
        result.append([parent.name] + [child.name for child in ordered_children])

    return result


def tree_has_sub_difficulties(tree: Iterable[DifficultyName]) -> bool:
    return any(isinstance(element, (list, tuple)) for element in tree)


def validate_map_difficulty(tree: List[DifficultyName], claimed: Any) -> Tuple[str, Optional[str]]:
    """
    Проверить modDifficulty карты по дереву сложностей мода.

    Если в дереве есть под-сложности, карта обязана указать пару
    [сложность, под-сложность]; иначе - просто имя. Возвращает (родитель, ребёнок|None).
    """
    if not tree:
        raise InvalidMapDifficulty(claimed)

    if tree_has_sub_difficulties(tree):
        if (
            not isinstance(claimed, (list, tuple))
            or len(claimed) != 2
            or not all(isinstance(name, str) for name in claimed)
        ):
            raise InvalidMapDifficulty(claimed)

        parent_name, child_name = claimed
        for element in tree:
            if isinstance(element, (list, tuple)) and element[0] == parent_name:
                if child_name in element[1:]:
                    return parent_name, child_name
                break
        raise InvalidMapDifficulty(claimed)

    if not isinstance(claimed, str) or claimed not in tree:
        raise InvalidMapDifficulty(claimed)
    return claimed, None
