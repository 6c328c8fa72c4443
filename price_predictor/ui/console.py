import os
from datetime import datetime
from typing import Optional, Sequence
from rich.console import Console, Group
from rich.table import Table
from rich.panel import Panel
from rich.text import Text
from rich import box
from colorama import Fore, Style, init

from price_predictor.config import Settings, get_settings
from price_predictor.schemas import AppState, Screen, TimeframeBucket

# Initialize colorama for Windows
init()


def format_usd(value: Optional[float]) -> str:
    """$1,234.56 or $-- when absent"""
    if value is None:
        return "$--"
    return f"${value:,.2f}"


def format_percent(percent: Optional[float]) -> str:
    """+8.53% or +--% when absent"""
    if percent is None:
        return "+--%"
    return f"+{percent:.2f}%"


def format_time(moment: Optional[datetime]) -> str:
    if moment is None:
        return "--"
    return moment.astimezone().strftime('%I:%M:%S %p')


class ConsoleUI:
    """Console UI manager for the two predictor screens"""

    def __init__(self, settings: Optional[Settings] = None, console: Optional[Console] = None,
                 ui_enabled: bool = True):
        self.console = console or Console()
        self.settings = settings or get_settings()
        self.ui_enabled = ui_enabled

    def clear_screen(self):
        """Clear the console screen"""
        if self.console.is_terminal:
            os.system('cls' if os.name == 'nt' else 'clear')

    def print_banner(self):
        """Print application banner"""
        title = self.settings.BANNER_TITLE.center(40)
        banner = f"""
{Fore.CYAN}╔════════════════════════════════════════╗
║{title}║
╚════════════════════════════════════════╝{Style.RESET_ALL}
"""
        print(banner)

    def build_main_view(self, state: AppState, buckets: Sequence[TimeframeBucket]) -> Group:
        """Live price and the timeframe selector"""
        info = Text()
        info.append(f"\n{self.settings.ASSET_SYMBOL} Price\n", style="bold cyan")
        info.append(f"{self.settings.PRICE_SOURCE_LABEL}\n\n", style="dim")

        if state.is_loading:
            info.append("Loading...\n", style="yellow")
            return Group(Panel(info, box=box.ROUNDED))

        if state.price is None:
            info.append(f"{state.error}\n", style="bold red")
            return Group(Panel(info, box=box.ROUNDED))

        info.append(f"{format_usd(state.price.value)}\n", style="bold green")
        info.append(f"Last updated: {format_time(state.price.observed_at)}\n", style="dim")
        if state.is_stale:
            info.append(f"⚠️ {state.error} Showing last known price.\n", style="bold red")

        selector = Table(show_header=True, header_style="bold cyan", box=box.ROUNDED,
                         title="Select a prediction timeframe:")
        selector.add_column("#", style="white", justify="right")
        selector.add_column("Timeframe", style="cyan")
        selector.add_column("Key", style="dim")
        for index, bucket in enumerate(buckets, start=1):
            selector.add_row(str(index), bucket.label, bucket.key)

        return Group(Panel(info, box=box.ROUNDED), selector)

    def build_prediction_view(self, state: AppState, buckets: Sequence[TimeframeBucket]) -> Group:
        """Predicted price, percent and the reselect action"""
        label = ""
        for bucket in buckets:
            if bucket.key == state.selected_bucket:
                label = bucket.label.lower()
                break

        prediction = state.prediction
        info = Text()
        info.append(f"\nEstimated price {label}:\n", style="cyan")
        info.append(f"{format_usd(prediction.predicted_price if prediction else None)}\n",
                    style="bold green")
        info.append(f"({format_percent(prediction.percent if prediction else None)})\n", style="cyan")
        info.append(f"\n{self.settings.PREDICTION_NOTE}\n", style="italic cyan")
        if state.error:
            info.append(f"⚠️ {state.error}\n", style="bold red")

        footer = Text(f"\n{self.settings.FOOTER_NOTE}", style="bold white")
        return Group(Panel(info, box=box.ROUNDED), footer)

    def build_view(self, state: AppState, buckets: Sequence[TimeframeBucket]) -> Group:
        if state.screen == Screen.PREDICTION:
            return self.build_prediction_view(state, buckets)
        return self.build_main_view(state, buckets)

    def prompt_text(self, state: AppState, bucket_count: int) -> str:
        if state.screen == Screen.PREDICTION:
            return "[r] Reselect timeframe   [q] Quit"
        if state.price is None:
            return "[q] Quit"
        return f"[1-{bucket_count}] Select timeframe   [q] Quit"

    def render(self, state: AppState, buckets: Sequence[TimeframeBucket]):
        """Redraw the whole screen for the given state"""
        if not self.ui_enabled:
            return
        self.clear_screen()
        self.print_banner()
        self.console.print(self.build_view(state, buckets))
        self.console.print(f"\n{self.prompt_text(state, len(buckets))}", style="dim", markup=False)

    def print_error(self, message: str):
        """Print error message"""
        if self.ui_enabled:
            self.console.print(f"❌ Error: {message}", style="bold red", markup=False)

    def print_warning(self, message: str):
        """Print warning message"""
        if self.ui_enabled:
            self.console.print(f"⚠️ {message}", style="bold yellow", markup=False)
