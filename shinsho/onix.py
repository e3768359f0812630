"""
openBD レコードのスキーマ

openBD の /get が返す ONIX 形式のレコードのうち、新書判定とメタデータ抽出に
必要な部分だけを定義する。単一オブジェクトと配列の両方で届くフィールドは
デコード時にリストへ揃える。
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _as_list(value: Any) -> list:
    """None / 単一要素 / リストをリストに揃える"""
    if value is None:
        return []
    if isinstance(value, list):
        return [v for v in value if v is not None]
    return [value]


def _as_text(value: Any) -> Any:
    """{"content": "..."} 形式を文字列に展開"""
    if isinstance(value, dict):
        return value.get("content", "")
    return value


class OnixModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, coerce_numbers_to_str=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # null は未設定として既定値に任せる
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class TextValue(OnixModel):
    """content を持つテキスト要素（文字列のみで届くこともある）"""

    content: str = ""
    collationkey: str = ""

    @model_validator(mode="before")
    @classmethod
    def _from_plain_string(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"content": data}
        return data


class TitleElement(OnixModel):
    title_text: Optional[TextValue] = Field(None, alias="TitleText")
    subtitle: Optional[TextValue] = Field(None, alias="Subtitle")

    @property
    def text(self) -> str:
        return self.title_text.content if self.title_text else ""


class TitleDetail(OnixModel):
    title_elements: list[TitleElement] = Field(default_factory=list, alias="TitleElement")

    @field_validator("title_elements", mode="before")
    @classmethod
    def _listify(cls, value: Any) -> list:
        return _as_list(value)

    def first_text(self) -> str:
        """最初の空でないタイトル文字列"""
        for element in self.title_elements:
            if element.text:
                return element.text
        return ""


class Collection(OnixModel):
    title_detail: Optional[TitleDetail] = Field(None, alias="TitleDetail")


class Contributor(OnixModel):
    person_name: Optional[TextValue] = Field(None, alias="PersonName")
    roles: list[str] = Field(default_factory=list, alias="ContributorRole")
    biographical_note: str = Field("", alias="BiographicalNote")

    @field_validator("roles", mode="before")
    @classmethod
    def _listify(cls, value: Any) -> list:
        return _as_list(value)

    @field_validator("biographical_note", mode="before")
    @classmethod
    def _text(cls, value: Any) -> Any:
        return _as_text(value)

    @property
    def name(self) -> str:
        return self.person_name.content if self.person_name else ""


class Extent(OnixModel):
    extent_type: str = Field("", alias="ExtentType")
    extent_value: str = Field("", alias="ExtentValue")
    extent_unit: str = Field("", alias="ExtentUnit")


class DescriptiveDetail(OnixModel):
    title_detail: Optional[TitleDetail] = Field(None, alias="TitleDetail")
    collection: Optional[Collection] = Field(None, alias="Collection")
    contributors: list[Contributor] = Field(default_factory=list, alias="Contributor")
    extents: list[Extent] = Field(default_factory=list, alias="Extent")

    @field_validator("contributors", "extents", mode="before")
    @classmethod
    def _listify(cls, value: Any) -> list:
        return _as_list(value)


class TextContent(OnixModel):
    text_type: str = Field("", alias="TextType")
    text: str = Field("", alias="Text")

    @field_validator("text", mode="before")
    @classmethod
    def _text(cls, value: Any) -> Any:
        return _as_text(value)


class ResourceVersion(OnixModel):
    resource_link: str = Field("", alias="ResourceLink")


class SupportingResource(OnixModel):
    content_type: str = Field("", alias="ResourceContentType")
    versions: list[ResourceVersion] = Field(default_factory=list, alias="ResourceVersion")

    @field_validator("versions", mode="before")
    @classmethod
    def _listify(cls, value: Any) -> list:
        return _as_list(value)


class CollateralDetail(OnixModel):
    text_contents: list[TextContent] = Field(default_factory=list, alias="TextContent")
    supporting_resources: list[SupportingResource] = Field(
        default_factory=list, alias="SupportingResource"
    )

    @field_validator("text_contents", "supporting_resources", mode="before")
    @classmethod
    def _listify(cls, value: Any) -> list:
        return _as_list(value)


class Imprint(OnixModel):
    imprint_name: str = Field("", alias="ImprintName")


class Publisher(OnixModel):
    publisher_name: str = Field("", alias="PublisherName")


class PublishingDetail(OnixModel):
    imprint: Optional[Imprint] = Field(None, alias="Imprint")
    publishers: list[Publisher] = Field(default_factory=list, alias="Publisher")

    @field_validator("publishers", mode="before")
    @classmethod
    def _listify(cls, value: Any) -> list:
        return _as_list(value)


class ProductIdentifier(OnixModel):
    id_type: str = Field("", alias="ProductIDType")
    id_value: str = Field("", alias="IDValue")


class Onix(OnixModel):
    record_reference: str = Field("", alias="RecordReference")
    product_identifier: Optional[ProductIdentifier] = Field(None, alias="ProductIdentifier")
    descriptive_detail: Optional[DescriptiveDetail] = Field(None, alias="DescriptiveDetail")
    collateral_detail: CollateralDetail = Field(default_factory=CollateralDetail, alias="CollateralDetail")
    publishing_detail: PublishingDetail = Field(default_factory=PublishingDetail, alias="PublishingDetail")

    @field_validator("product_identifier", mode="before")
    @classmethod
    def _first_identifier(cls, value: Any) -> Any:
        # 複数ある場合は先頭を使う
        if isinstance(value, list):
            return value[0] if value else None
        return value


class Summary(OnixModel):
    """openBD の summary ブロック"""

    isbn: str = ""
    title: str = ""
    volume: str = ""
    series: str = ""
    publisher: str = ""
    pubdate: str = ""
    cover: str = ""
    author: str = ""


class Hanmoto(OnixModel):
    """openBD の hanmoto ブロック（登録日・更新日）"""

    datekoukai: str = ""
    datemodified: str = ""
    datecreated: str = ""


class OpenBDRecord(OnixModel):
    """openBD の1レコード"""

    onix: Optional[Onix] = None
    summary: Summary = Field(default_factory=Summary)
    hanmoto: Hanmoto = Field(default_factory=Hanmoto)


def decode_record(raw: dict) -> OpenBDRecord:
    """生の JSON レコードをデコード（形が不正なら pydantic.ValidationError）"""
    return OpenBDRecord.model_validate(raw)
