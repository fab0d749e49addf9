"""
Generic HTTP controller for keyed entities.

A ``GenericController`` turns one ``EntityConfig`` and a model factory into a
FastAPI router with list, read, create, update and delete endpoints. Key routes
are generated from the entity's ``key_columns`` (``/{code}`` or
``/{customer}/{site}``), so single and composite keys share every handler.

Handlers only translate between HTTP and ``GenericModel`` calls:
- expected failures come back as ``OperationResult`` and map to 404 / 400;
- unexpected exceptions are left to the application-wide handler.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Generic, List, Optional, Sequence, Tuple, Type, TypeVar, Union

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from qc_tracker.core.database.store import Store
from qc_tracker.core.keyed import (
    EntityConfig,
    ErrorKind,
    GenericModel,
    MissingKeyError,
    OperationResult,
    QueryOptions,
    RequestContext,
    extract_key_values,
)
from qc_tracker.core.logging_config import get_logger

from .deps import get_request_context, get_store
from .responses import error_response, success_response, validation_error_response

logger = get_logger(__name__)

E = TypeVar("E")

ModelFactory = Callable[[Store], GenericModel[E]]


class GenericController(Generic[E]):
    """Exposes a keyed entity over HTTP.

    Extra endpoints registered with ``add_route`` are matched before the
    generated key routes, so fixed paths such as ``/customer/{code}`` are
    never captured by ``/{key}``; creating an entity whose key would be
    shadowed by one of those paths (a code named ``health``) is rejected. The
    generated routes are added the first time ``router`` is read.
    """

    def __init__(
        self,
        config: EntityConfig,
        model_factory: ModelFactory[E],
        create_schema: Optional[Type[BaseModel]] = None,
        update_schema: Optional[Type[BaseModel]] = None,
        filter_schema: Optional[Type[BaseModel]] = None,
        key_schema: Optional[Type[BaseModel]] = None,
        tags: Optional[List[str]] = None,
    ) -> None:
        """Bind the controller to an entity.

        Args:
            config: Entity description; its key columns shape the routes
            model_factory: Builds the entity's model for a store, once per request
            create_schema: Validates POST bodies
            update_schema: Validates PUT bodies; only fields the client sent are applied
            filter_schema: Coerces list-query filters (``?is_active=true``)
            key_schema: Converts route key values to their column types (``"5"`` to ``5``)
            tags: OpenAPI tags for every route
        """
        self.config = config
        self.model_factory = model_factory
        self.create_schema = create_schema
        self.update_schema = update_schema
        self.filter_schema = filter_schema
        self.key_schema = key_schema
        self._router = APIRouter(tags=tags or [])
        self._crud_registered = False
        self._fixed_paths: List[Tuple[str, ...]] = []

        self.add_route(
            "/health",
            self.health,
            methods=["GET"],
            summary=f"{config.entity_name} Health",
            description=f"Check that the {config.table_name} table is reachable and holds active records.",
        )
        self.add_route(
            "/statistics",
            self.statistics,
            methods=["GET"],
            summary=f"{config.entity_name} Statistics",
            description=f"Total, active and inactive {config.entity_name.lower()} counts.",
        )

    @property
    def router(self) -> APIRouter:
        if not self._crud_registered:
            self._register_crud_routes()
            self._crud_registered = True
        return self._router

    def add_route(self, path: str, endpoint: Callable[..., Any], methods: Sequence[str], **kwargs: Any) -> None:
        """Register an entity-specific endpoint ahead of the generated ones.

        Raises:
            RuntimeError: If the generated routes are already registered
        """
        if self._crud_registered:
            raise RuntimeError(f"{self.config.entity_name}: add_route must be called before the router is used")
        kwargs.setdefault("response_model", None)
        self._fixed_paths.append(tuple(path.strip("/").split("/")))
        self._router.add_api_route(path, endpoint, methods=list(methods), **kwargs)

    def _register_crud_routes(self) -> None:
        name = self.config.entity_name
        key_path = self.config.key_path
        self._router.add_api_route(
            "",
            self.get_all,
            methods=["GET"],
            response_model=None,
            summary=f"List {name}",
            description="Paginated list with optional search, sorting and equality filters.",
        )
        self._router.add_api_route(
            "",
            self.create,
            methods=["POST"],
            response_model=None,
            status_code=status.HTTP_201_CREATED,
            summary=f"Create {name}",
            responses={400: {"description": "Invalid body, duplicate key or broken reference"}},
        )
        self._router.add_api_route(
            key_path,
            self.get_by_key,
            methods=["GET"],
            response_model=None,
            summary=f"Get {name}",
            responses={404: {"description": f"{name} not found"}},
        )
        self._router.add_api_route(
            key_path,
            self.update,
            methods=["PUT"],
            response_model=None,
            summary=f"Update {name}",
            description="Partial update; fields omitted from the body keep their values.",
            responses={404: {"description": f"{name} not found"}},
        )
        self._router.add_api_route(
            key_path,
            self.delete,
            methods=["DELETE"],
            response_model=None,
            summary=f"Delete {name}",
            responses={
                400: {"description": f"{name} is still referenced"},
                404: {"description": f"{name} not found"},
            },
        )

    def get_model(self, store: Store = Depends(get_store)) -> GenericModel[E]:
        """Dependency building the entity's model on the request's store."""
        return self.model_factory(store)

    # ==================== HANDLERS ====================

    async def get_all(self, request: Request, store: Store = Depends(get_store)) -> JSONResponse:
        query = request.query_params
        try:
            filters = self._parse_filters(query)
        except ValidationError as exc:
            return validation_error_response(exc)

        options = QueryOptions(
            page=query.get("page", 1),
            limit=query.get("limit"),
            sort_by=query.get("sortBy"),
            sort_order=query.get("sortOrder"),
            search=query.get("search"),
            filters=filters,
        )
        result = await self.model_factory(store).find_all(options)
        return success_response(
            data=result.data,
            message=f"{self.config.entity_name} list retrieved successfully",
            pagination=result.pagination,
        )

    async def get_by_key(self, request: Request, store: Store = Depends(get_store)) -> JSONResponse:
        key_values = self._key_values(request)
        if isinstance(key_values, JSONResponse):
            return key_values

        entity = await self.model_factory(store).get_by_key(key_values)
        if entity is None:
            return error_response(
                ErrorKind.NOT_FOUND, f"{self.config.entity_name} not found", status.HTTP_404_NOT_FOUND
            )
        return success_response(data=entity, message=f"{self.config.entity_name} retrieved successfully")

    async def create(
        self,
        request: Request,
        store: Store = Depends(get_store),
        context: RequestContext = Depends(get_request_context),
    ) -> JSONResponse:
        body = await self._read_body(request)
        if isinstance(body, JSONResponse):
            return body
        if self.create_schema is not None:
            try:
                body = self.create_schema.model_validate(body).model_dump()
            except ValidationError as exc:
                return validation_error_response(exc)

        shadowing = self._shadowing_route(body)
        if shadowing is not None:
            return error_response(
                ErrorKind.VALIDATION_ERROR,
                f"{self.config.entity_name} key conflicts with the fixed route {shadowing}",
            )

        result = await self.model_factory(store).create(body, context)
        if not result.success:
            return self._failure(result)
        return success_response(
            data=result.data,
            message=f"{self.config.entity_name} created successfully",
            status_code=status.HTTP_201_CREATED,
        )

    async def update(
        self,
        request: Request,
        store: Store = Depends(get_store),
        context: RequestContext = Depends(get_request_context),
    ) -> JSONResponse:
        key_values = self._key_values(request)
        if isinstance(key_values, JSONResponse):
            return key_values

        body = await self._read_body(request)
        if isinstance(body, JSONResponse):
            return body
        if self.update_schema is not None:
            try:
                body = self.update_schema.model_validate(body).model_dump(exclude_unset=True)
            except ValidationError as exc:
                return validation_error_response(exc)

        result = await self.model_factory(store).update(key_values, body, context)
        if not result.success:
            return self._failure(result)
        return success_response(data=result.data, message=f"{self.config.entity_name} updated successfully")

    async def delete(self, request: Request, store: Store = Depends(get_store)) -> JSONResponse:
        key_values = self._key_values(request)
        if isinstance(key_values, JSONResponse):
            return key_values

        result = await self.model_factory(store).delete(key_values)
        if not result.success:
            return self._failure(result)
        return success_response(message=f"{self.config.entity_name} deleted successfully")

    async def health(self, store: Store = Depends(get_store)) -> JSONResponse:
        report = await self.model_factory(store).health()
        return success_response(data=report, message=f"{self.config.entity_name} health is {report.status.value}")

    async def statistics(self, store: Store = Depends(get_store)) -> JSONResponse:
        stats = await self.model_factory(store).statistics()
        return success_response(data=stats, message=f"{self.config.entity_name} statistics retrieved successfully")

    # ==================== HELPERS ====================

    def _key_values(self, request: Request) -> Union[Dict[str, Any], JSONResponse]:
        try:
            key_values = extract_key_values(self.config, request.path_params)
        except MissingKeyError as exc:
            return error_response(ErrorKind.MISSING_KEY, str(exc))
        if self.key_schema is None:
            return key_values
        try:
            parsed = self.key_schema.model_validate(key_values)
        except ValidationError as exc:
            return validation_error_response(exc)
        return {column: getattr(parsed, column) for column in self.config.key_columns}

    def _shadowing_route(self, body: Dict[str, Any]) -> Optional[str]:
        """Fixed route that a GET on this body's key would hit instead of the key route."""
        if any(body.get(column) is None for column in self.config.key_columns):
            return None
        segments = [str(body[column]) for column in self.config.key_columns]
        for fixed in self._fixed_paths:
            if len(fixed) == len(segments) and all(
                part.startswith("{") or part == value for part, value in zip(fixed, segments)
            ):
                return "/" + "/".join(fixed)
        return None

    def _parse_filters(self, query: Any) -> Dict[str, Any]:
        raw = {column: query.get(column) for column in self.config.filterable_columns if column in query}
        if not raw or self.filter_schema is None:
            return raw
        parsed = self.filter_schema.model_validate(raw).model_dump(exclude_unset=True)
        return {column: value for column, value in parsed.items() if column in raw}

    async def _read_body(self, request: Request) -> Any:
        try:
            body = await request.json()
        except ValueError:
            return error_response(ErrorKind.VALIDATION_ERROR, "Request body must be valid JSON")
        if not isinstance(body, dict):
            return error_response(ErrorKind.VALIDATION_ERROR, "Request body must be a JSON object")
        return body

    def _failure(self, result: OperationResult) -> JSONResponse:
        status_code = status.HTTP_404_NOT_FOUND if result.error == ErrorKind.NOT_FOUND else status.HTTP_400_BAD_REQUEST
        return error_response(result.error, result.message or "Operation failed", status_code)
