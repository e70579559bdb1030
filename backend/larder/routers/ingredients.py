from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from larder.database import get_db
from larder.models.user import User
from larder.schemas.ingredient import DedupReport, IngredientCreate, IngredientResponse
from larder.services import catalog
from larder.tasks.ingredient_dedup import merge_duplicate_ingredients
from larder.utils.auth import get_current_user
from larder.utils.pagination import paginate, pagination_params

router = APIRouter()


@router.get("/", response_model=dict)
def list_ingredients(
    page: dict = Depends(pagination_params),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return paginate(catalog.list_ingredients(db), page["skip"], page["limit"], IngredientResponse)


@router.get("/categories", response_model=list[str])
def list_categories(current_user: User = Depends(get_current_user)):
    return list(catalog.CATEGORIES)


@router.get("/search", response_model=list[IngredientResponse])
def search_ingredients(
    q: str = "",
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return catalog.search_ingredients(db, q)


@router.get("/category/{category}", response_model=list[IngredientResponse])
def by_category(
    category: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return catalog.ingredients_by_category(db, category)


@router.post("/", response_model=IngredientResponse, status_code=201)
def add_ingredient(
    body: IngredientCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return catalog.add_ingredient(db, body.name, body.category, body.default_unit)


@router.post("/seed")
def seed_ingredients(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return catalog.seed_ingredients(db)


@router.post("/dedup", response_model=DedupReport)
def dedup_ingredients(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return merge_duplicate_ingredients(db)
