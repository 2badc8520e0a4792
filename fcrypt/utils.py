# fcrypt/utils.py
import psutil


# --- Helper Functions ---
def format_duration(seconds: float) -> str:
    if seconds < 60: return f"{seconds:.2f} seconds"
    minutes, seconds = divmod(seconds, 60)
    return f"{int(minutes)} minute(s) and {seconds:.2f} seconds"

def resource_stats() -> str:
    """CPU/RAM usage line shown on progress bars in debug mode."""
    return f"CPU: {psutil.cpu_percent()}% | RAM: {psutil.virtual_memory().percent}%"

def get_title_suffix(debug_mode: bool) -> str:
    return " [DEBUG]" if debug_mode else ""
