from collections import Counter

import customtkinter as ctk

from models.category import Category, icon_glyph
from services.sync_service import SyncService
from stores.app_store import AppStore
from ui.components.category_form import CategoryForm
from ui.components.confirm_dialog import ConfirmDialog
from utils.errors import FinanceTrackerError

_TILE_COLUMNS = 3
_NO_COLOR = "gray50"


class CategoriesTab(ctk.CTkFrame):
    """Category tiles with how many expenses use each one."""

    def __init__(self, master, store: AppStore, sync_service: SyncService,
                 notify_refresh, show_error, **kwargs):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._store = store
        self._sync = sync_service
        self._notify_refresh = notify_refresh
        self._show_error = show_error

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))
        self._count_label = ctk.CTkLabel(bar, text="", font=ctk.CTkFont(size=13, weight="bold"))
        self._count_label.pack(side="left", padx=12, pady=8)
        ctk.CTkButton(bar, text="+ Add Category", command=self._open_form).pack(
            side="right", padx=8, pady=6
        )

        self._grid = ctk.CTkScrollableFrame(self)
        self._grid.grid(row=1, column=0, sticky="nsew", padx=8, pady=8)
        self._grid.grid_columnconfigure(tuple(range(_TILE_COLUMNS)), weight=1, uniform="tile")
        self._load()

    def refresh(self):
        self._load()

    def _load(self):
        for w in self._grid.winfo_children():
            w.destroy()

        categories = self._store.categories.get_all()
        self._count_label.configure(text=f"Categories ({len(categories)})")
        if not categories:
            ctk.CTkLabel(
                self._grid,
                text="No categories yet. Add one to start grouping expenses.",
                text_color="gray60",
            ).grid(row=0, column=0, columnspan=_TILE_COLUMNS, pady=40)
            return

        usage = Counter(
            e.category_id for e in self._store.expenses.get_all() if e.category_id is not None
        )
        for i, cat in enumerate(categories):
            self._make_tile(cat, usage[cat.id]).grid(
                row=i // _TILE_COLUMNS, column=i % _TILE_COLUMNS, sticky="nsew", padx=4, pady=4
            )

    def _make_tile(self, cat: Category, used: int) -> ctk.CTkFrame:
        tile = ctk.CTkFrame(self._grid, fg_color=("gray90", "gray20"), corner_radius=8)
        tile.grid_columnconfigure(1, weight=1)

        # Color strip down the left edge.
        ctk.CTkFrame(tile, width=6, fg_color=cat.color or _NO_COLOR, corner_radius=3).grid(
            row=0, column=0, rowspan=3, sticky="ns", padx=(6, 8), pady=8
        )
        ctk.CTkLabel(tile, text=f"{icon_glyph(cat.icon)}  {cat.name}", anchor="w",
                     font=ctk.CTkFont(size=14, weight="bold")).grid(
            row=0, column=1, sticky="w", pady=(10, 0)
        )
        noun = "expense" if used == 1 else "expenses"
        ctk.CTkLabel(tile, text=f"{used} {noun}", anchor="w", text_color="gray60",
                     font=ctk.CTkFont(size=11)).grid(row=1, column=1, sticky="w")

        actions = ctk.CTkFrame(tile, fg_color="transparent")
        actions.grid(row=2, column=1, sticky="e", padx=8, pady=(4, 8))
        ctk.CTkButton(
            actions, text="Edit", width=56, height=24,
            fg_color="transparent", border_width=1, text_color=("gray10", "gray90"),
            command=lambda: self._open_form(cat),
        ).pack(side="left", padx=(0, 4))
        ctk.CTkButton(
            actions, text="Delete", width=60, height=24,
            fg_color="#F44336", hover_color="#D32F2F",
            command=lambda: self._on_delete(cat, used),
        ).pack(side="left")
        return tile

    def _open_form(self, cat: Category | None = None):
        form = CategoryForm(self.winfo_toplevel(), self._sync, category=cat)
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("category")

    def _on_delete(self, cat: Category, used: int):
        message = f"Delete '{cat.name}'?"
        if used:
            message += f" {used} expense(s) will show as Uncategorized."
        dlg = ConfirmDialog(self.winfo_toplevel(), title="Delete Category", message=message)
        if not dlg.result:
            return
        try:
            self._sync.remove_category(cat.id)
        except FinanceTrackerError as e:
            self._show_error(f"Could not delete category: {e}")
        self._notify_refresh("category")
