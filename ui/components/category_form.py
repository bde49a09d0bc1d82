import customtkinter as ctk
import tkinter as tk
from tkinter import colorchooser

from models.category import Category
from services.sync_service import SyncService
from ui.components.confirm_dialog import center_on_master
from utils.constants import CATEGORY_COLORS, CATEGORY_ICONS, DEFAULT_CATEGORY_ICON
from utils.errors import FinanceTrackerError

_ICONS_PER_ROW = 6
_PALETTE_PER_ROW = 8
_SELECTED_BORDER = ("#1f6aa5", "#3a8fd6")


class CategoryForm(ctk.CTkToplevel):
    """Add or edit a category: name, an icon from the glyph grid, and a color."""

    def __init__(self, master, sync_service: SyncService, category: Category | None = None, **kwargs):
        super().__init__(master, **kwargs)
        self._sync = sync_service
        self._category = category
        self._row = 0
        self.saved = False

        self.title("Edit Category" if category else "New Category")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        self._name_var = ctk.StringVar(value=category.name if category else "")
        ctk.CTkEntry(self._field("Name:"), textvariable=self._name_var, width=240).pack(fill="x")

        self._icon = (category.icon if category else None) or DEFAULT_CATEGORY_ICON
        self._icon_buttons: dict[str, ctk.CTkButton] = {}
        icon_grid = self._field("Icon:")
        for idx, (icon_id, glyph) in enumerate(CATEGORY_ICONS.items()):
            btn = ctk.CTkButton(
                icon_grid, text=glyph, width=36, height=32,
                fg_color=("gray85", "gray25"), hover_color=("gray75", "gray35"),
                text_color=("gray10", "gray90"), border_width=2,
                command=lambda i=icon_id: self._select_icon(i),
            )
            btn.grid(row=idx // _ICONS_PER_ROW, column=idx % _ICONS_PER_ROW, padx=2, pady=2)
            self._icon_buttons[icon_id] = btn
        self._select_icon(self._icon)

        self._build_color_field((category.color if category else None) or CATEGORY_COLORS[0])

        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=300, anchor="w",
        ).grid(row=self._row, column=0, columnspan=2, padx=16, sticky="ew")

        buttons = ctk.CTkFrame(self, fg_color="transparent")
        buttons.grid(row=self._row + 1, column=0, columnspan=2, padx=16, pady=(4, 16), sticky="ew")
        ctk.CTkButton(
            buttons, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self.destroy,
        ).pack(side="left")
        ctk.CTkButton(buttons, text="Save", width=90, command=self._on_save).pack(side="right")

        self.transient(master)
        self.grab_set()
        center_on_master(self)

    def _field(self, label: str) -> ctk.CTkFrame:
        """Add a labelled row and return the frame its widget goes into."""
        top = 16 if self._row == 0 else 4
        ctk.CTkLabel(self, text=label).grid(
            row=self._row, column=0, padx=(16, 8), pady=(top, 4), sticky="ne"
        )
        holder = ctk.CTkFrame(self, fg_color="transparent")
        holder.grid(row=self._row, column=1, padx=(0, 16), pady=(top, 4), sticky="ew")
        self._row += 1
        return holder

    def _build_color_field(self, initial: str):
        holder = self._field("Color:")
        self._color_var = ctk.StringVar(value=initial)

        line = ctk.CTkFrame(holder, fg_color="transparent")
        line.pack(fill="x")
        entry = ctk.CTkEntry(line, textvariable=self._color_var, width=100)
        entry.pack(side="left")
        entry.bind("<FocusOut>", lambda _e: self._show_typed_color())
        self._swatch = ctk.CTkLabel(line, text="", width=32, height=24, corner_radius=4, fg_color=initial)
        self._swatch.pack(side="left", padx=8)
        ctk.CTkButton(
            line, text="Custom…", width=70,
            fg_color="transparent", border_width=1, text_color=("gray10", "gray90"),
            command=self._pick_custom_color,
        ).pack(side="left")

        palette = ctk.CTkFrame(holder, fg_color="transparent")
        palette.pack(fill="x", pady=(6, 0))
        for idx, color in enumerate(CATEGORY_COLORS):
            ctk.CTkButton(
                palette, text="", width=20, height=20, corner_radius=10,
                fg_color=color, hover_color=color,
                command=lambda c=color: self._set_color(c),
            ).grid(row=idx // _PALETTE_PER_ROW, column=idx % _PALETTE_PER_ROW, padx=2, pady=2)

    def _select_icon(self, icon_id: str):
        self._icon = icon_id
        for key, btn in self._icon_buttons.items():
            btn.configure(border_color=_SELECTED_BORDER if key == icon_id else ("gray85", "gray25"))

    def _set_color(self, color: str):
        self._color_var.set(color)
        self._swatch.configure(fg_color=color)

    def _pick_custom_color(self):
        _rgb, hex_color = colorchooser.askcolor(
            color=self._color_var.get(), parent=self, title="Category Color"
        )
        if hex_color:
            self._set_color(hex_color)

    def _show_typed_color(self):
        # Leave the swatch alone until the text is a color Tk understands.
        try:
            self._swatch.configure(fg_color=self._color_var.get().strip())
        except (ValueError, tk.TclError):
            pass

    def _on_save(self):
        fields = {
            "name": self._name_var.get(),
            "icon": self._icon,
            "color": self._color_var.get().strip(),
        }
        try:
            if self._category:
                self._sync.update_category(self._category.id, **fields)
            else:
                self._sync.add_category(**fields)
        except FinanceTrackerError as e:
            self._error_var.set(str(e))
            return
        self.saved = True
        self.destroy()
