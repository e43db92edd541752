from fastapi import APIRouter, Depends, Query

from pagetree.api.dependencies import get_store
from pagetree.core.menu import flatten_menu, get_menu
from pagetree.core.ports.database import PageStore
from pagetree.models import MenuItem

router = APIRouter(prefix="/menu", tags=["menu"])


@router.get("/{locale}", response_model=list[MenuItem])
async def menu(
    locale: str,
    flat: bool = Query(False),
    store: PageStore = Depends(get_store),
) -> list[MenuItem]:
    items = await get_menu(store, locale)
    return flatten_menu(items) if flat else items
