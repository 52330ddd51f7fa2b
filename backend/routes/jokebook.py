from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request, Response, status
from typing import Any, List, Optional

from controllers.jokebook_controller import JokebookController
from models.jokebook import CategoryResponse, ErrorResponse, JokeResponse

router = APIRouter(
    tags=["Jokebook"],
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


def get_controller(request: Request) -> JokebookController:
    """Controller bound to the store created at application startup."""
    return JokebookController(
        request.app.state.store,
        max_limit=request.app.state.settings.MAX_JOKES_PER_PAGE,
    )


@router.get("/categories", response_model=List[CategoryResponse])
async def list_categories(controller: JokebookController = Depends(get_controller)):
    """List all categories ordered by name."""
    return await controller.list_categories()


@router.get("/categories/{category_id}", response_model=List[JokeResponse])
async def list_jokes_by_category_id(
    category_id: str,
    limit: Optional[str] = Query(default=None, description="Maximum number of jokes"),
    controller: JokebookController = Depends(get_controller),
):
    """List the jokes of a category by its numeric id, oldest first."""
    return await controller.list_jokes_by_category_id(category_id, limit)


@router.get("/category/{name}", response_model=List[JokeResponse])
async def list_jokes_by_category_name(
    name: str,
    limit: Optional[str] = Query(default=None, description="Maximum number of jokes"),
    controller: JokebookController = Depends(get_controller),
):
    """List the jokes of a category by name (case-insensitive), oldest first."""
    return await controller.list_jokes_by_category_name(name, limit)


@router.get("/random", response_model=JokeResponse)
async def random_joke(controller: JokebookController = Depends(get_controller)):
    return await controller.random_joke()


@router.post("/jokes", response_model=JokeResponse, status_code=status.HTTP_201_CREATED)
async def add_joke(
    body: Any = Body(default=None),
    controller: JokebookController = Depends(get_controller),
):
    """Add a joke. The category is created on first use."""
    return await controller.add_joke(body)


@router.put("/jokes/{joke_id}", response_model=JokeResponse)
async def update_joke(
    joke_id: str,
    body: Any = Body(default=None),
    controller: JokebookController = Depends(get_controller),
):
    return await controller.update_joke(joke_id, body)


@router.delete("/jokes/{joke_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_joke(joke_id: str, controller: JokebookController = Depends(get_controller)):
    await controller.delete_joke(joke_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.api_route(
    "/{path:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
async def jokebook_not_found(path: str):
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Jokebook resource not found")
