from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from catalog.database import get_db
from catalog.models.product import Product
from catalog.schemas.product import ProductValidationError
from catalog.services.product_service import ProductService
from catalog.utils.templates import TemplateRenderer, get_renderer

router = APIRouter(prefix="/products", tags=["Products"])

PRODUCT_NOT_FOUND = "Product not found"


async def get_form_data(request: Request) -> dict:
    """Read the submitted form fields; uploaded files are ignored."""
    form = await request.form()
    return {key: value for key, value in form.items() if isinstance(value, str)}


def form_values(product: Product) -> dict:
    """Product fields keyed the way the form names them."""
    return {
        "name": product.name,
        "description": product.description or "",
        "price": product.price,
        "stock": product.stock,
        "imageUrl": product.image_url or "",
    }


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=status.HTTP_302_FOUND)


@router.get(
    "",
    response_class=HTMLResponse,
    summary="List all products",
    description="Render every product in creation order."
)
def list_products(
    request: Request,
    db: Session = Depends(get_db),
    renderer: TemplateRenderer = Depends(get_renderer)
):
    service = ProductService(db)
    products = service.list_all()
    return renderer.render(
        request,
        "products/index.html",
        {"title": "All Products", "products": products}
    )


@router.get(
    "/create",
    response_class=HTMLResponse,
    summary="Create product form"
)
def create_product_form(
    request: Request,
    renderer: TemplateRenderer = Depends(get_renderer)
):
    return renderer.render(
        request,
        "products/create.html",
        {"title": "Create Product", "form": {}, "errors": []}
    )


@router.post(
    "",
    response_class=HTMLResponse,
    summary="Create a new product",
    description="Create a product from a submitted form and redirect to the list."
)
def create_product(
    request: Request,
    form_data: dict = Depends(get_form_data),
    db: Session = Depends(get_db),
    renderer: TemplateRenderer = Depends(get_renderer)
):
    """
    Create a new product.

    - **name**: Product name (required, non-empty)
    - **description**: Free text (optional)
    - **price**: Product price, must be non-negative (required)
    - **stock**: Stock quantity, must be a non-negative integer (defaults to 0)
    - **imageUrl**: Image URL (optional)

    Invalid input re-renders the form with the submitted values and errors.
    """
    service = ProductService(db)
    try:
        service.create(form_data)
    except ProductValidationError as e:
        return renderer.render(
            request,
            "products/create.html",
            {"title": "Create Product", "form": form_data, "errors": e.errors}
        )

    return _redirect("/products")


@router.get(
    "/{product_id:int}",
    response_class=HTMLResponse,
    summary="Get product by ID"
)
def get_product(
    product_id: int,
    request: Request,
    db: Session = Depends(get_db),
    renderer: TemplateRenderer = Depends(get_renderer)
):
    service = ProductService(db)
    product = service.get_by_id(product_id)

    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PRODUCT_NOT_FOUND)

    return renderer.render(
        request,
        "products/show.html",
        {"title": product.name, "product": product}
    )


@router.get(
    "/{product_id:int}/edit",
    response_class=HTMLResponse,
    summary="Edit product form"
)
def edit_product_form(
    product_id: int,
    request: Request,
    db: Session = Depends(get_db),
    renderer: TemplateRenderer = Depends(get_renderer)
):
    service = ProductService(db)
    product = service.get_by_id(product_id)

    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PRODUCT_NOT_FOUND)

    return renderer.render(
        request,
        "products/edit.html",
        {
            "title": f"Edit {product.name}",
            "product_id": product.id,
            "form": form_values(product),
            "errors": [],
        }
    )


@router.put(
    "/{product_id:int}",
    response_class=HTMLResponse,
    summary="Update a product",
    description="Replace every field of a product. Forms reach this with POST ?_method=PUT."
)
def update_product(
    product_id: int,
    request: Request,
    form_data: dict = Depends(get_form_data),
    db: Session = Depends(get_db),
    renderer: TemplateRenderer = Depends(get_renderer)
):
    service = ProductService(db)
    try:
        product = service.update(product_id, form_data)
    except ProductValidationError as e:
        return renderer.render(
            request,
            "products/edit.html",
            {
                "title": f"Edit {form_data.get('name', '')}".strip(),
                "product_id": product_id,
                "form": form_data,
                "errors": e.errors,
            }
        )

    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PRODUCT_NOT_FOUND)

    return _redirect(f"/products/{product.id}")


@router.delete(
    "/{product_id:int}",
    summary="Delete a product",
    description="Delete a product by ID. Forms reach this with POST ?_method=DELETE."
)
def delete_product(
    product_id: int,
    db: Session = Depends(get_db)
):
    service = ProductService(db)
    deleted = service.delete(product_id)

    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PRODUCT_NOT_FOUND)

    return _redirect("/products")
