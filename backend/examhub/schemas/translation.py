"""Translation Schemas — CMS key bodies, single and bulk."""

from pydantic import BaseModel


class TranslationBody(BaseModel):
    key: str | None = None
    english: str | None = None
    hindi: str | None = None
    marathi: str | None = None
    is_published: bool | None = None


class TranslationBulkBody(BaseModel):
    translations: list[TranslationBody] | None = None
