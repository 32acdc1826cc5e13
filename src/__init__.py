"""
Trade-Service Company Research Engine

Researches a trade-service business (roofing, HVAC, plumbing, ...) for
onboarding:
1. Plans research with an AI strategist
2. Discovers social profiles and listings via web search/scrape
3. Structures findings into a canonical company profile
4. Scores confidence and data quality, falling back to competitor research
5. Produces local SEO recommendations
"""

__version__ = "0.1.0"
