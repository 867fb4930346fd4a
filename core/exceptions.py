#/core/exceptions.py

"""
Кастомные исключения приложения.
Сервисы только выбрасывают их, маппинг на HTTP статусы - забота слоя запросов.
"""

from typing import List, Optional


class CelesteModsException(Exception):
    """Базовое исключение для всех ошибок бэкенда"""
    pass


class InvalidRequest(CelesteModsException):
    """Запрос не содержит обязательных данных"""
    pass


# ========== DIFFICULTIES ==========

class MalformedDifficultySubmission(CelesteModsException):
    """Список сложностей имеет неправильную форму"""
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Malformed difficulty submission: {reason}")


class CorruptDifficultyTree(CelesteModsException):
    """Сохранённое дерево сложностей повреждено"""
    pass


class NonContiguousOrderError(CorruptDifficultyTree):
    """Порядки сложностей не образуют последовательность 1..N"""
    def __init__(self, mod_id: Optional[int], parent_name: Optional[str] = None):
        self.mod_id = mod_id
        self.parent_name = parent_name
        owner = f"mod {mod_id}" if mod_id is not None else "the default difficulties"
        if parent_name is None:
            message = f"Parent difficulty orders for {owner} are not continuous"
        else:
            message = (
                f"Child difficulty orders for parent difficulty {parent_name} "
                f"in {owner} are not continuous"
            )
        super().__init__(message)


class InvalidMapDifficulty(CelesteModsException):
    """modDifficulty карты не совпадает со сложностями мода"""
    def __init__(self, claimed=None):
        self.claimed = claimed
        super().__init__(
            "All maps in a non-Normal mod must be assigned a modDifficulty that matches "
            "the difficulties used by the mod (whether default or custom). If the mod uses "
            "sub-difficulties, modDifficulty must be given in the form [difficulty, sub-difficulty]."
            + (f" Got: {claimed!r}" if claimed is not None else "")
        )


class DefaultDifficultiesMissing(CelesteModsException):
    """В БД нет сложностей по умолчанию"""
    def __init__(self):
        super().__init__("There are no default difficulties")


class DuplicateDifficultyOrder(CelesteModsException):
    """У двух родительских сложностей по умолчанию одинаковый order"""
    def __init__(self, order: int):
        self.order = order
        super().__init__(f"Two default parent difficulties have the same order ({order})")


class CanonicalDifficultyNotFound(CelesteModsException):
    """canonicalDifficulty не совпадает ни с одной родительской сложностью по умолчанию"""
    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"canonicalDifficulty '{name}' does not match any default parent difficulty names"
        )


# ========== CATALOG ==========

class TechNotFound(CelesteModsException):
    """Техника не найдена"""
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Tech '{name}' did not match the names of any tech in the database")


class MapLengthNotFound(CelesteModsException):
    """Длина карты не найдена"""
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Length '{name}' does not match the name of any map lengths in the database")


# ========== ENTITIES ==========

class UserNotFound(CelesteModsException):
    """Пользователь не найден в БД"""
    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__(f"No user found with ID = {user_id}")


class ModNotFound(CelesteModsException):
    """Мод не найден в БД"""
    def __init__(self, mod_id: int):
        self.mod_id = mod_id
        super().__init__(f"Mod {mod_id} not found")


class MapNotFound(CelesteModsException):
    """Карта не найдена в БД"""
    def __init__(self, map_id: int):
        self.map_id = map_id
        super().__init__(f"Map {map_id} not found")


class PublisherNotFound(CelesteModsException):
    """Издатель не найден"""
    def __init__(self, publisher_id: int):
        self.publisher_id = publisher_id
        super().__init__(f"Publisher {publisher_id} not found")


class NoPublisherForUser(CelesteModsException):
    """У пользователя нет издателей"""
    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__(f"User {user_id} has no associated publishers")


class AmbiguousPublisher(CelesteModsException):
    """Издатель определяется неоднозначно - нужен publisherID"""
    def __init__(self, publisher_ids: List[int]):
        self.publisher_ids = publisher_ids
        super().__init__(
            f"More than one publisher matches. Please specify publisherID instead. "
            f"Matching publisher IDs: {publisher_ids}"
        )


class DuplicateGamebananaMod(CelesteModsException):
    """gamebananaModID уже используется другим модом"""
    def __init__(self, gamebanana_mod_id: int, mod_id: int):
        self.gamebanana_mod_id = gamebanana_mod_id
        self.mod_id = mod_id
        super().__init__(f"gamebananaModID {gamebanana_mod_id} already belongs to mod {mod_id}")


class UnauthorizedAccess(CelesteModsException):
    """Несанкционированный доступ (не модератор и т.д.)"""
    def __init__(self, user_id: int, action: str):
        self.user_id = user_id
        self.action = action
        super().__init__(f"User {user_id} not authorized for action: {action}")


# ========== GAMEBANANA ==========

class UpstreamIdentityLookupFailure(CelesteModsException):
    """GameBanana API недоступен или ответил не так, как ожидалось"""
    pass


class GamebananaMemberNotFound(UpstreamIdentityLookupFailure):
    """Пользователь не существует на GameBanana"""
    def __init__(self, identifier):
        self.identifier = identifier
        super().__init__(f"Member {identifier!r} does not exist on GameBanana")
