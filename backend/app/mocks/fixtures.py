"""
Mock response fixtures for development and testing.

Scenarios:
- full_list: 10 priced, scored wines from a typical high-end wine list
- mixed_data: full_list plus wines missing market price and/or scores
- empty_list: Nothing could be read from the list
"""

from ..models import AnalysisStats, AnalyzeResponse, RankingResponse, WineResult
from ..models.enums import DataSource
from ..services.formatting import format_wines_as_markdown
from ..services.ranking import rank_wines
from ..services.wine_records import Wine


def _sample(lwin, name, vintage, restaurant_price, real_price, markup,
            critic_score, critic, varietal, region, color) -> Wine:
    return Wine(
        display_name=name,
        restaurant_price=restaurant_price,
        vintage=vintage,
        real_price=real_price,
        markup=markup,
        critic_score=critic_score,
        critic_count=1,
        critic=critic,
        varietal=varietal,
        region=region,
        color=color,
        lwin=lwin,
        lwin7=lwin,
        data_source=DataSource.WINE_LABS,
    )


SAMPLE_WINES = [
    _sample("1012781", "Château Margaux, Premier Grand Cru Classé", "2015", 850, 425, 100,
            98, "Robert Parker", "Cabernet Sauvignon Blend", "Margaux, Bordeaux", "Red"),
    _sample("1047329", "Screaming Eagle Cabernet Sauvignon", "2018", 3500, 1200, 192,
            100, "Antonio Galloni", "Cabernet Sauvignon", "Napa Valley, California", "Red"),
    _sample("1003443", "Domaine de la Romanée-Conti, La Tâche Grand Cru", "2017", 4200, 2800, 50,
            97, "Jancis Robinson", "Pinot Noir", "Vosne-Romanée, Burgundy", "Red"),
    _sample("1089234", "Catena Zapata Malbec Argentino", "2019", 68, 42, 62,
            94, "Wine Spectator", "Malbec", "Mendoza, Argentina", "Red"),
    _sample("1067432", "Tenuta San Guido Sassicaia", "2016", 285, 165, 73,
            96, "James Suckling", "Cabernet Sauvignon", "Bolgheri, Tuscany", "Red"),
    _sample("1034521", "Domaine Leflaive Bâtard-Montrachet Grand Cru", "2018", 520, 380, 37,
            95, "Vinous", "Chardonnay", "Puligny-Montrachet, Burgundy", "White"),
    _sample("1078234", "Kistler Vineyards Chardonnay", "2020", 95, 58, 64,
            93, "Wine Advocate", "Chardonnay", "Sonoma Coast, California", "White"),
    _sample("1012456", "Dom Pérignon Vintage Brut", "2012", 350, 220, 59,
            96, "Wine Enthusiast", "Chardonnay/Pinot Noir", "Champagne, France", "White"),
    _sample("1089765", "Opus One", "2017", 450, 185, 143,
            95, "Wine Spectator", "Cabernet Sauvignon Blend", "Oakville, Napa Valley", "Red"),
    _sample("1056789", "Vega Sicilia Único", "2010", 380, 285, 33,
            97, "Tim Atkin", "Tempranillo", "Ribera del Duero, Spain", "Red"),
]


INCOMPLETE_WINES = [
    # No identity, price or scores
    Wine(display_name="House Red Wine", restaurant_price=45, vintage="2020"),
    # Priced but unscored
    Wine(display_name="Mystery Cabernet", restaurant_price=120, vintage="2017", real_price=75, markup=60),
    # Web search match with an estimated price
    Wine(
        display_name="Domaine Drouhin Pinot Noir",
        restaurant_price=75,
        vintage="2019",
        critic_score=91,
        critic_count=1,
        critic="Wine & Spirits",
        data_source=DataSource.WEB_SEARCH,
        search_confidence=0.7,
        web_search_price=48,
        web_search_source="wine-searcher.com",
    ),
]


MOCK_SCENARIOS = {
    "full_list": SAMPLE_WINES,
    "mixed_data": SAMPLE_WINES[:5] + INCOMPLETE_WINES + SAMPLE_WINES[5:],
    "empty_list": [],
}


def get_mock_response(scenario: str = "full_list") -> AnalyzeResponse:
    """
    Get a mock analysis for the given scenario.

    Args:
        scenario: One of full_list, mixed_data, empty_list

    Returns:
        AnalyzeResponse with mock data, ranked by the real ranking code
    """
    if scenario not in MOCK_SCENARIOS:
        scenario = "full_list"

    wines = MOCK_SCENARIOS[scenario]

    return AnalyzeResponse(
        wines=[WineResult.from_wine(w) for w in wines],
        rankings=RankingResponse.from_results(rank_wines(wines)),
        stats=AnalysisStats(
            total=len(wines),
            matched=sum(1 for w in wines if w.data_source is not None),
            web_search=sum(1 for w in wines if w.data_source == DataSource.WEB_SEARCH),
        ),
        summary=format_wines_as_markdown(wines),
    )
