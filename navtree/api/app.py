"""
HTTP surface for hosts that drive the reorder engine over the network.

The app holds the session's in-memory tree as the source of truth. Every
accepted change updates it synchronously and schedules a fire-and-forget
write to the store; a failed write is logged and does not roll back the
in-memory tree. The one-time migration is the exception: it is written
synchronously so its durable flag never outlives a failed save.
"""

from logging import getLogger

from fastapi import BackgroundTasks, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from navtree.api.models import MaintenanceResponse, MoveRequest, MoveResponse
from navtree.data_models.integrity import TreeIntegrityError, assert_valid_tree
from navtree.data_models.tree import Tree
from navtree.migration.compaction import compact_tree, perform_migration
from navtree.reorder.executor import apply_drag_end
from navtree.storage.manager import TreeStore
from navtree.utils.config import ReorderSettings, get_settings

logger = getLogger(__name__)


def persist_tree(store: TreeStore, tree: Tree) -> None:
    try:
        store.set_tree(tree)
    except Exception as e:
        logger.error(f"Failed to persist tree: {e}")


def create_app(store: TreeStore, settings: ReorderSettings | None = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(title="navtree")
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.store = store
    app.state.settings = settings
    app.state.tree = store.get_tree()

    def current_tree(request: Request) -> Tree:
        return request.app.state.tree

    def commit(request: Request, tree: Tree, background_tasks: BackgroundTasks):
        request.app.state.tree = tree
        background_tasks.add_task(persist_tree, request.app.state.store, tree)

    @app.get("/tree")
    async def get_tree(request: Request) -> Tree:
        return current_tree(request)

    @app.put("/tree")
    async def put_tree(
        tree: Tree, request: Request, background_tasks: BackgroundTasks
    ) -> Tree:
        try:
            assert_valid_tree(tree)
        except TreeIntegrityError as e:
            raise HTTPException(status_code=422, detail=e.violations)
        commit(request, tree, background_tasks)
        return tree

    @app.post("/tree/moves")
    async def move(
        body: MoveRequest, request: Request, background_tasks: BackgroundTasks
    ) -> MoveResponse:
        """Apply a completed drag to the in-memory tree."""
        tree = current_tree(request)
        if body.categoryId is not None and not any(
            c.id == body.categoryId for c in tree.categories
        ):
            raise HTTPException(
                status_code=404, detail=f"Category {body.categoryId} not found"
            )

        result = apply_drag_end(
            tree, body.descriptor, body.categoryId, settings.order_gap
        )
        if result.changed:
            commit(request, result.tree, background_tasks)

        return MoveResponse(
            tree=result.tree,
            changed=result.changed,
            topology=result.topology,
            notifications=list(result.notifications),
        )

    @app.post("/tree/migrate")
    async def migrate(request: Request) -> MaintenanceResponse:
        """Run the one-time order key migration."""
        tree = current_tree(request)
        store = request.app.state.store

        def save(migrated: Tree) -> None:
            store.set_tree(migrated)
            request.app.state.tree = migrated

        try:
            migrated = perform_migration(
                tree, store, save, settings.order_gap, settings.min_gap
            )
        except TreeIntegrityError as e:
            raise HTTPException(status_code=422, detail=e.violations)
        changed = migrated is not tree
        return MaintenanceResponse(
            tree=migrated,
            changed=changed,
            message="Migrated order keys" if changed else "No migration needed",
        )

    @app.post("/tree/compact")
    async def compact(
        request: Request, background_tasks: BackgroundTasks
    ) -> MaintenanceResponse:
        tree = current_tree(request)
        compacted = compact_tree(tree, settings.min_gap, settings.order_gap)
        changed = compacted is not tree
        if changed:
            commit(request, compacted, background_tasks)
        return MaintenanceResponse(
            tree=compacted,
            changed=changed,
            message="Compacted order keys" if changed else "Order keys are healthy",
        )

    return app
