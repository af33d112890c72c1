"""Translation Routes — CMS keys and per-language reads.

Invariants:
    - No route-level role gate; the service checks editor roles per action
    - /allTranslations is registered before /{language} so it is not read as
      a language name
"""

from fastapi import APIRouter, Depends, status

from examhub.api.dependencies import get_identity, get_translation_service
from examhub.api.responses import success
from examhub.config import get_settings
from examhub.core.identity import Identity
from examhub.schemas.translation import TranslationBody, TranslationBulkBody
from examhub.services.translations import TranslationService

router = APIRouter(
    prefix=f"{get_settings().api_prefix}/translations", tags=["translations"],
)


@router.post("/addCmsKey")
async def add_cms_key(
    body: TranslationBody,
    identity: Identity = Depends(get_identity),
    service: TranslationService = Depends(get_translation_service),
):
    created = await service.create(identity, body.model_dump(exclude_unset=True))
    return success("Translation created successfully", created, status.HTTP_201_CREATED)


@router.post("/bulkAddCmsKey")
async def bulk_add_cms_keys(
    body: TranslationBulkBody,
    identity: Identity = Depends(get_identity),
    service: TranslationService = Depends(get_translation_service),
):
    items = (
        [item.model_dump(exclude_unset=True) for item in body.translations]
        if body.translations is not None else None
    )
    created = await service.bulk_create(identity, items)
    return success(
        f"{len(created)} translations created successfully",
        created,
        status.HTTP_201_CREATED,
    )


@router.get("/allTranslations")
async def all_translations(
    identity: Identity = Depends(get_identity),
    service: TranslationService = Depends(get_translation_service),
):
    rows = await service.list_all(identity)
    return success("Translations retrieved successfully", rows)


@router.get("/{language}")
async def translations_for_language(
    language: str,
    identity: Identity = Depends(get_identity),
    service: TranslationService = Depends(get_translation_service),
):
    rows = await service.for_language(identity, language)
    if not rows:
        return success("No translations found", rows)
    return success(f"{language.capitalize()} translations retrieved successfully", rows)


@router.put("/updateTranslation/{translation_id}")
async def update_translation(
    translation_id: str,
    body: TranslationBody,
    identity: Identity = Depends(get_identity),
    service: TranslationService = Depends(get_translation_service),
):
    updated = await service.update(
        identity, translation_id, body.model_dump(exclude_unset=True),
    )
    return success("Translation updated successfully", updated)


@router.delete("/deleteTranslationKey/{translation_id}")
async def delete_translation_key(
    translation_id: str,
    identity: Identity = Depends(get_identity),
    service: TranslationService = Depends(get_translation_service),
):
    deleted = await service.soft_delete(identity, translation_id)
    return success("Translation deleted successfully", deleted)
