import customtkinter as ctk

SEVERITY_COLORS = {
    "error":   "#F44336",
    "warning": "#FF9800",
    "success": "#4CAF50",
    "info":    "#2196F3",
}


class AlertBanner(ctk.CTkFrame):
    """Dismissible colored strip used as a toast for sync results and errors.

    auto_dismiss_ms > 0 removes the banner on its own after that delay.
    """

    def __init__(self, master, message: str, severity: str = "info",
                 action_text: str | None = None, action_cmd=None,
                 auto_dismiss_ms: int = 0, **kwargs):
        super().__init__(master, fg_color=SEVERITY_COLORS.get(severity, SEVERITY_COLORS["info"]),
                         corner_radius=6, **kwargs)
        self.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(
            self, text=message, text_color="white", anchor="w", padx=10, pady=6,
        ).grid(row=0, column=0, sticky="ew")

        actions = ctk.CTkFrame(self, fg_color="transparent")
        actions.grid(row=0, column=1, padx=(0, 4))
        if action_text and action_cmd:
            ctk.CTkButton(
                actions, text=action_text, width=60, height=24,
                fg_color="transparent", border_width=1, border_color="white",
                text_color="white", command=action_cmd,
            ).pack(side="left", padx=2)
        ctk.CTkButton(
            actions, text="✕", width=28, height=24,
            fg_color="transparent", text_color="white",
            command=self.destroy,
        ).pack(side="left")

        if auto_dismiss_ms > 0:
            self.after(auto_dismiss_ms, self._dismiss)

    def _dismiss(self):
        if self.winfo_exists():
            self.destroy()
