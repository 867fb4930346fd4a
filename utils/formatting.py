# utils/formatting.py

"""
ORM-объекты -> JSON-ответы (ключи как в публичном API сайта).
Пустые необязательные поля не выводятся.
"""

from typing import Any, Dict, List, Optional, Union

from core.exceptions import MapNotFound, ModNotFound
from models.difficulty import Difficulty
from models.map import Map, MapDetails
from models.mod import Mod, ModDetails
from models.publisher import Publisher
from utils.difficulty_tree import sort_difficulty_names


def _drop_none(data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


def latest_details(revisions: List[Any], approved_only: bool = True) -> Optional[Any]:
    """Последняя (одобренная) ревизия или None"""
    candidates = [r for r in revisions if r.time_approved is not None] if approved_only else list(revisions)
    if not candidates:
        return None
    return max(candidates, key=lambda r: r.revision)


def difficulty_display(difficulty: Optional[Difficulty]) -> Optional[Union[str, List[str]]]:
    """Сложность карты: 'Name' или ['Parent', 'Child']"""
    if difficulty is None:
        return None
    if difficulty.parent is not None:
        return [difficulty.parent.name, difficulty.name]
    return difficulty.name


def format_map(map_: Map, approved_only: bool = True) -> Dict[str, Any]:
    details: Optional[MapDetails] = latest_details(map_.details, approved_only)
    if details is None:
        raise MapNotFound(map_.id)

    tech_any = [link.tech.name for link in details.tech_links if not link.full_clear_only]
    tech_fc = [link.tech.name for link in details.tech_links if link.full_clear_only]

    return _drop_none({
        "id": map_.id,
        "revision": details.revision,
        "modID": map_.mod_id,
        "name": details.name,
        "canonicalDifficulty": details.canonical_difficulty.name,
        "length": details.length.name,
        "description": details.description,
        "notes": details.notes,
        "minimumModVersion": details.minimum_mod_version,
        "mapRemovedFromModBool": details.map_removed_from_mod,
        "mapperUserID": details.mapper_user_id,
        "mapperNameString": details.mapper_name_string,
        "chapter": details.chapter,
        "side": details.side.value if details.side else None,
        "modDifficulty": difficulty_display(details.mod_difficulty),
        "overallRank": details.overall_rank,
        "techAny": tech_any or None,
        "techFC": tech_fc or None,
        "approved": details.is_approved,
    })


def format_mod(mod: Mod, approved_only: bool = True) -> Dict[str, Any]:
    details: Optional[ModDetails] = latest_details(mod.details, approved_only)
    if details is None:
        raise ModNotFound(mod.id)

    maps = [
        format_map(map_, approved_only)
        for map_ in mod.maps
        if latest_details(map_.details, approved_only) is not None
    ]

    formatted = _drop_none({
        "id": mod.id,
        "revision": details.revision,
        "type": details.type.value,
        "name": details.name,
        "publisherID": details.publisher_id,
        "publisherGamebananaID": details.publisher.gamebanana_id if details.publisher else None,
        "contentWarning": details.content_warning,
        "notes": details.notes,
        "shortDescription": details.short_description,
        "longDescription": details.long_description,
        "gamebananaModID": details.gamebanana_mod_id,
        "approved": details.is_approved,
    })
    formatted["maps"] = maps

    if mod.difficulties:
        formatted["difficulties"] = sort_difficulty_names(mod.difficulties, mod.id)

    return formatted


def format_publisher(publisher: Publisher) -> Dict[str, Any]:
    return _drop_none({
        "id": publisher.id,
        "name": publisher.name,
        "gamebananaID": publisher.gamebanana_id,
        "userID": publisher.user_id,
    })
