from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel
from typing import Dict, List

from ecologika.core.config import settings
from ecologika.db.session import get_db
from ecologika.models.interest import Interest, InterestGroups
from ecologika.services.i18n import Translator, get_translator, resolve_language
from ecologika.services.interests import categorize_interests, list_interests

router = APIRouter()

ONE_YEAR = 60 * 60 * 24 * 365

class LanguageChoice(BaseModel):
    language: str

class TranslationTable(BaseModel):
    language: str
    translations: Dict[str, str]

@router.get("/i18n", response_model=TranslationTable)
async def get_translations(tr: Translator = Depends(get_translator)):
    return TranslationTable(language=tr.language, translations=tr.table())

@router.put("/i18n/language", response_model=TranslationTable)
async def set_language(choice: LanguageChoice, response: Response):
    # Unknown languages fall back to the default instead of failing
    language = resolve_language(choice.language)
    response.set_cookie(settings.LANGUAGE_COOKIE, language, max_age=ONE_YEAR, samesite="lax")
    tr = Translator(language)
    return TranslationTable(language=tr.language, translations=tr.table())

@router.get("/interests", response_model=InterestGroups)
async def get_interests(db=Depends(get_db)):
    return categorize_interests(await list_interests(db))

@router.get("/interests/all", response_model=List[Interest])
async def get_all_interests(db=Depends(get_db)):
    return await list_interests(db)
