"""
Text formatting of pipeline results for display and chat.
"""

from .wine_records import Wine


def format_price(price: float) -> str:
    return f"${price:.2f}"


def format_markup(markup: float) -> str:
    return f"{markup:.0f}%"


def format_wines_as_markdown(wines: list[Wine]) -> str:
    """
    Format wines as a markdown bullet list for the chat assistant.

    Market price and markup come from Wine Labs when available, otherwise the
    web search estimate (with its source) is shown.
    """
    if not wines:
        return "No wines found."

    blocks = []
    for wine in wines:
        title = wine.display_name
        if wine.vintage:
            title += f" ({wine.vintage})"
        lines = [f"• **{title}**", f"  - Restaurant Price: {format_price(wine.restaurant_price)}"]

        if wine.real_price:
            lines.append(f"  - Market Price: {format_price(wine.real_price)}")
            if wine.markup is not None:
                sign = "+" if wine.markup > 0 else ""
                lines.append(f"  - Markup: {sign}{wine.markup:.1f}%")
        elif wine.web_search_price:
            line = f"  - Est. Market Price: {format_price(wine.web_search_price)}"
            if wine.web_search_source:
                line += f" ({wine.web_search_source})"
            lines.append(line)

        if wine.critic_score:
            lines.append(f"  - Avg. Critic Score: {wine.critic_score:g}/100")
        if wine.varietal:
            lines.append(f"  - Varietal: {wine.varietal}")
        if wine.region:
            lines.append(f"  - Region: {wine.region}")

        blocks.append("\n".join(lines))

    return "## Wine List Analysis\n\n" + "\n\n".join(blocks)
