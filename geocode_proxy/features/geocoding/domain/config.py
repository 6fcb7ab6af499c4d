"""ジオコーディングプロバイダーの設定モデル"""
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class HereConfig(BaseModel):
    """HERE Geocoder APIの認証情報"""

    model_config = ConfigDict(frozen=True)

    kind: Literal["here"] = "here"
    app_id: str
    app_code: str


class MapQuestConfig(BaseModel):
    """MapQuest Geocoding APIの認証情報"""

    model_config = ConfigDict(frozen=True)

    kind: Literal["mapquest"] = "mapquest"
    key: str


ProviderConfig = Annotated[Union[HereConfig, MapQuestConfig], Field(discriminator="kind")]

# 設定ファイル上のタグ名 -> kind
PROVIDER_TAGS = {
    "Here": "here",
    "MapQuest": "mapquest",
}

# kind -> 設定ファイル上のタグ名
PROVIDER_KINDS = {kind: tag for tag, kind in PROVIDER_TAGS.items()}


class FinderConfig(BaseModel):
    """
    問い合わせ先プロバイダーの設定

    ``protocols`` の並び順がそのままフォールバックの優先順位になる。
    設定ファイルでは ``{"Here": {...}}`` のようにタグ付きで記述する
    """

    model_config = ConfigDict(frozen=True)

    protocols: tuple[ProviderConfig, ...] = ()

    @field_validator("protocols", mode="before")
    @classmethod
    def _untag_protocols(cls, value: Any) -> Any:
        """タグ付き表現を ``kind`` 付きの辞書に変換"""
        if not isinstance(value, (list, tuple)):
            return value

        return [cls._untag(entry) for entry in value]

    @staticmethod
    def _untag(entry: Any) -> Any:
        if isinstance(entry, BaseModel) or not isinstance(entry, dict):
            return entry
        if "kind" in entry:
            return entry

        if len(entry) != 1:
            raise ValueError(
                f"Provider entry must have exactly one tag, got: {sorted(entry)}"
            )

        tag, body = next(iter(entry.items()))
        if tag not in PROVIDER_TAGS:
            raise ValueError(
                f"Unknown provider: {tag} (expected one of {sorted(PROVIDER_TAGS)})"
            )
        if not isinstance(body, dict):
            raise ValueError(f"Provider {tag} settings must be an object")

        return {**body, "kind": PROVIDER_TAGS[tag]}

    @field_serializer("protocols")
    def _tag_protocols(
        self, protocols: tuple[ProviderConfig, ...]
    ) -> list[dict[str, dict[str, str]]]:
        """設定ファイルと同じタグ付き表現で出力"""
        return [
            {PROVIDER_KINDS[p.kind]: p.model_dump(exclude={"kind"})}
            for p in protocols
        ]
