from dataclasses import dataclass
from typing import List, Sequence


@dataclass(frozen=True)
class FeedSource:
    name: str
    url: str
    category: str


ALL_FEEDS: Sequence[FeedSource] = (
    # International
    FeedSource("BBC World", "http://feeds.bbci.co.uk/news/world/rss.xml", "Politics"),
    FeedSource("BBC Business", "http://feeds.bbci.co.uk/news/business/rss.xml", "Economy"),
    FeedSource("BBC Tech", "http://feeds.bbci.co.uk/news/technology/rss.xml", "Technology"),
    FeedSource("The Guardian", "https://www.theguardian.com/world/rss", "Politics"),
    FeedSource("Reuters Top", "https://www.reutersagency.com/feed/?best-topics=business-finance&post_type=best", "Economy"),
    FeedSource("Al Jazeera", "https://www.aljazeera.com/xml/rss/all.xml", "Politics"),
    FeedSource("NPR News", "https://feeds.npr.org/1001/rss.xml", "Politics"),
    FeedSource("The New York Times", "https://rss.nytimes.com/services/xml/rss/nyt/World.xml", "Politics"),
    FeedSource("Axios Main", "https://www.axios.com/feeds/feed.rss", "Politics"),
    FeedSource("Axios Econ", "https://api.axios.com/feed/", "Economy"),
    # Technology
    FeedSource("TechCrunch", "https://techcrunch.com/feed/", "Technology"),
    FeedSource("The Verge", "https://www.theverge.com/rss/index.xml", "Technology"),
    FeedSource("Wired", "https://www.wired.com/feed/rss", "Technology"),
    FeedSource("Ars Technica", "https://feeds.arstechnica.com/arstechnica/index", "Technology"),
    # Sports
    FeedSource("ESPN", "https://www.espn.com/espn/rss/news", "Sports"),
    FeedSource("BBC Sport", "http://feeds.bbci.co.uk/sport/rss.xml", "Sports"),
    FeedSource("Sky Sports", "https://www.skysports.com/rss/12040", "Sports"),
    FeedSource("Marca (Spain)", "https://e00-marca.uecdn.es/rss/portada.xml", "Sports"),
    FeedSource("AS (Spain)", "https://as.com/rss/tags/ultimas_noticias.xml", "Sports"),
    # Magazines & culture
    FeedSource("The Economist", "https://www.economist.com/the-world-this-week/rss.xml", "Economy"),
    FeedSource("TIME Magazine", "https://time.com/feed/", "Culture"),
    FeedSource("Forbes", "https://www.forbes.com/business/feed/", "Economy"),
    FeedSource("National Geographic", "https://www.nationalgeographic.com/feed/", "Culture"),
    # Health & medicine
    FeedSource("WHO News", "https://www.who.int/rss-feeds/news-english.xml", "Health"),
    FeedSource("Medical News Today", "https://www.medicalnewstoday.com/newsfeeds/rss", "Health"),
    FeedSource("WebMD", "https://rssfeeds.webmd.com/rss/rss.aspx?RSSSource=RSS_PUBLIC", "Health"),
    FeedSource("Health.com", "https://www.health.com/syndication/rss", "Health"),
    FeedSource("Healthline", "https://www.healthline.com/rss/health-news", "Health"),
    FeedSource("National Geographic", "https://www.nationalgeographic.com/rss/index.xml", "Culture"),
    # Research & medical journals
    FeedSource("ScienceDaily Health", "https://www.sciencedaily.com/rss/health_medicine.xml", "Health"),
    FeedSource("Mayo Clinic", "https://newsnetwork.mayoclinic.org/feed/", "Health"),
    FeedSource("Harvard Health", "https://www.health.harvard.edu/rss/staying-healthy.xml", "Health"),
    FeedSource("Psychology Today", "https://www.psychologytoday.com/us/feed/news", "Health"),
    FeedSource("New Scientist Health", "https://www.newscientist.com/subject/health/feed/", "Health"),
    FeedSource("CNN Health", "http://rss.cnn.com/rss/cnn_health.rss", "Health"),
    FeedSource("NYT Health", "https://rss.nytimes.com/services/xml/rss/nyt/Health.xml", "Health"),
    FeedSource("BBC Health", "http://feeds.bbci.co.uk/news/health/rss.xml", "Health"),
    FeedSource("NPR Health", "https://feeds.npr.org/1128/rss.xml", "Health"),
    # Economy
    FeedSource("CNBC", "https://www.cnbc.com/id/100003114/device/rss/rss.html", "Economy"),
    FeedSource("Financial Times", "https://www.ft.com/world?format=rss", "Economy"),
)

# Ticker sources, category is informational only
BREAKING_FEEDS: Sequence[FeedSource] = (
    FeedSource("BBC", "http://feeds.bbci.co.uk/news/world/rss.xml", "Politics"),
    FeedSource("Al Jazeera", "https://www.aljazeera.com/xml/rss/all.xml", "Politics"),
    FeedSource("CNN", "http://rss.cnn.com/rss/edition_world.rss", "Politics"),
    FeedSource("Reuters", "https://www.reutersagency.com/feed/?taxonomy=best-topics&post_type=best", "Politics"),
)


def feeds_for_category(category: str, feeds: Sequence[FeedSource] = ALL_FEEDS) -> List[FeedSource]:
    return [feed for feed in feeds if feed.category.lower() == category.lower()]
