"""
Industry Reference Data

Default services, USPs and trade directories per industry. Used to seed
profiles when research comes back thin.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass(frozen=True)
class IndustryDirectory:
    name: str
    url: str
    priority: str = "HIGH"  # CRITICAL, HIGH, MEDIUM, LOW


@dataclass(frozen=True)
class IndustryConfig:
    key: str
    name: str
    provider_noun: str
    default_services: List[str] = field(default_factory=list)
    default_usps: List[str] = field(default_factory=list)
    directories: List[IndustryDirectory] = field(default_factory=list)
    aliases: List[str] = field(default_factory=list)


INDUSTRIES: Dict[str, IndustryConfig] = {
    "roofing": IndustryConfig(
        key="roofing",
        name="Roofing",
        provider_noun="roofers",
        default_services=[
            "Roof Repair", "Roof Replacement", "Roof Inspection", "Emergency Repair",
            "Storm Damage", "Leak Repair", "Insurance Claims", "Commercial Roofing",
            "Asphalt Shingles", "Architectural Shingles",
        ],
        default_usps=["24/7 Emergency", "Free Estimates", "Free Inspections", "Licensed & Insured"],
        directories=[
            IndustryDirectory("GAF Contractor Locator", "gaf.com"),
            IndustryDirectory("Owens Corning Network", "owenscorning.com"),
            IndustryDirectory("CertainTeed Directory", "certainteed.com"),
            IndustryDirectory("NRCA Member Directory", "nrca.net"),
        ],
        aliases=["roofer", "roofers", "roof", "roofing contractor"],
    ),
    "hvac": IndustryConfig(
        key="hvac",
        name="HVAC",
        provider_noun="HVAC contractors",
        default_services=[
            "AC Repair", "AC Installation", "Heating Repair", "Furnace Installation",
            "Heat Pump Services", "Emergency HVAC", "HVAC Maintenance", "Commercial HVAC",
        ],
        default_usps=["24/7 Emergency", "Free Estimates", "Licensed & Insured"],
        directories=[
            IndustryDirectory("Trane Dealer Locator", "trane.com"),
            IndustryDirectory("Carrier Factory Authorized", "carrier.com"),
            IndustryDirectory("Lennox Premier Dealer", "lennox.com"),
            IndustryDirectory("ACCA Member", "acca.org", "MEDIUM"),
        ],
        aliases=["heating", "cooling", "air conditioning", "heating and cooling", "ac repair"],
    ),
    "plumbing": IndustryConfig(
        key="plumbing",
        name="Plumbing",
        provider_noun="plumbers",
        default_services=[
            "Drain Cleaning", "Leak Repair", "Water Heater Repair", "Water Heater Installation",
            "Pipe Repair", "Emergency Plumbing", "Toilet Repair", "Commercial Plumbing",
        ],
        default_usps=["24/7 Emergency", "Free Estimates", "Licensed & Insured"],
        directories=[
            IndustryDirectory("Plumbing-Heating-Cooling Contractors Association", "phccweb.org"),
            IndustryDirectory("Roto-Rooter Franchise", "rotorooter.com", "MEDIUM"),
        ],
        aliases=["plumber", "plumbers"],
    ),
    "electrical": IndustryConfig(
        key="electrical",
        name="Electrical",
        provider_noun="electricians",
        default_services=[
            "Electrical Repair", "Panel Upgrades", "Outlet Installation", "Lighting Installation",
            "Ceiling Fan Installation", "Emergency Electrical", "Wiring Repair", "Commercial Electrical",
        ],
        default_usps=["24/7 Emergency", "Free Estimates", "Licensed & Insured"],
        directories=[
            IndustryDirectory("NECA (National Electrical Contractors Association)", "necanet.org"),
            IndustryDirectory("Independent Electrical Contractors", "ieci.org", "MEDIUM"),
        ],
        aliases=["electrician", "electricians", "electric"],
    ),
    "landscaping": IndustryConfig(
        key="landscaping",
        name="Landscaping",
        provider_noun="landscapers",
        default_services=[
            "Lawn Mowing", "Lawn Care", "Landscape Design", "Landscape Installation",
            "Mulching", "Pruning & Trimming", "Spring Cleanup", "Fall Cleanup",
        ],
        default_usps=["Free Estimates", "Licensed & Insured", "Locally Owned"],
        directories=[
            IndustryDirectory("National Association of Landscape Professionals", "landscapeprofessionals.org"),
            IndustryDirectory("LawnStarter", "lawnstarter.com", "MEDIUM"),
        ],
        aliases=["landscaper", "landscapers", "lawn care", "lawn service"],
    ),
    "pest": IndustryConfig(
        key="pest",
        name="Pest Control",
        provider_noun="exterminators",
        default_services=[
            "General Pest Control", "Ant Control", "Roach Control", "Spider Control",
            "Rodent Control", "Bed Bug Treatment", "Termite Control",
        ],
        default_usps=["Free Inspection", "Licensed & Insured"],
        directories=[
            IndustryDirectory("National Pest Management Association", "npmapestworld.org"),
            IndustryDirectory("QualityPro Certified", "npmaqualitypro.org"),
        ],
        aliases=["pest control", "exterminator", "exterminators", "termite"],
    ),
    "cleaning": IndustryConfig(
        key="cleaning",
        name="Cleaning",
        provider_noun="cleaning services",
        default_services=[
            "House Cleaning", "Deep Cleaning", "Move-In Cleaning", "Move-Out Cleaning",
            "Recurring Cleaning", "One-Time Cleaning",
        ],
        default_usps=["Free Estimates", "Licensed & Insured", "Background Checked"],
        directories=[
            IndustryDirectory("ISSA (Cleaning Industry Association)", "issa.com", "MEDIUM"),
            IndustryDirectory("ARCSI", "arcsi.org", "MEDIUM"),
        ],
        aliases=["cleaners", "maid service", "house cleaning", "janitorial"],
    ),
    "painting": IndustryConfig(
        key="painting",
        name="Painting",
        provider_noun="painters",
        default_services=["Interior Painting", "Exterior Painting", "Cabinet Painting", "Deck Staining"],
        default_usps=["Free Estimates", "Licensed & Insured"],
        directories=[IndustryDirectory("Painting Contractors Association", "pcapainted.org")],
        aliases=["painter", "painters", "painting contractor"],
    ),
    "flooring": IndustryConfig(
        key="flooring",
        name="Flooring",
        provider_noun="flooring contractors",
        default_services=[
            "Hardwood Installation", "Hardwood Refinishing", "Laminate Installation",
            "Vinyl Installation", "Tile Installation", "Carpet Installation",
        ],
        default_usps=["Free Estimates", "Licensed & Insured"],
        directories=[IndustryDirectory("National Wood Flooring Association", "nwfa.org")],
        aliases=["floors", "hardwood floors", "flooring contractor"],
    ),
    "garage": IndustryConfig(
        key="garage",
        name="Garage Doors",
        provider_noun="garage door companies",
        default_services=[
            "Garage Door Repair", "Garage Door Installation", "Spring Replacement",
            "Opener Repair", "Opener Installation", "Emergency Service",
        ],
        default_usps=["24/7 Emergency", "Free Estimates", "Licensed & Insured"],
        directories=[IndustryDirectory("International Door Association", "doors.org")],
        aliases=["garage door", "garage doors", "garage door repair"],
    ),
    "windows": IndustryConfig(
        key="windows",
        name="Windows & Doors",
        provider_noun="window installers",
        default_services=[
            "Window Replacement", "Window Installation", "Door Replacement",
            "Entry Door Installation", "Patio Door Installation",
        ],
        default_usps=["Free Estimates", "Licensed & Insured"],
        directories=[IndustryDirectory("Window & Door Manufacturers Association", "wdma.com")],
        aliases=["window", "windows and doors", "window replacement"],
    ),
    "solar": IndustryConfig(
        key="solar",
        name="Solar",
        provider_noun="solar installers",
        default_services=[
            "Solar Panel Installation", "Solar Consultation", "Solar System Design", "Solar Financing",
        ],
        default_usps=["Free Solar Consultation", "Licensed & Insured"],
        directories=[
            IndustryDirectory("Solar Energy Industries Association", "seia.org"),
            IndustryDirectory("EnergySage", "energysage.com"),
        ],
        aliases=["solar panels", "solar installer", "solar energy"],
    ),
    "pool": IndustryConfig(
        key="pool",
        name="Pool Service",
        provider_noun="pool service companies",
        default_services=[
            "Pool Cleaning", "Pool Maintenance", "Pool Repair", "Pool Opening",
            "Pool Closing", "Chemical Balancing",
        ],
        default_usps=["Free Estimates", "Licensed & Insured"],
        directories=[IndustryDirectory("Association of Pool & Spa Professionals", "apsp.org")],
        aliases=["pool service", "pool cleaning", "pools"],
    ),
    "general": IndustryConfig(
        key="general",
        name="General Contractor",
        provider_noun="general contractors",
        default_services=[
            "Home Remodeling", "Kitchen Remodeling", "Bathroom Remodeling",
            "Basement Finishing", "Room Additions", "Home Repairs",
        ],
        default_usps=["Free Estimates", "Licensed & Insured"],
        directories=[
            IndustryDirectory("National Association of Home Builders", "nahb.org"),
            IndustryDirectory("Associated Builders and Contractors", "abc.org", "MEDIUM"),
        ],
        aliases=["general contractor", "contractor", "remodeling", "remodeler", "construction"],
    ),
}


def resolve_industry(industry: Optional[str]) -> Optional[IndustryConfig]:
    """
    Map free-text industry ("Roofing Contractor", "HVAC", "plumber") to a config.

    Exact key/name/alias match first, then substring match.
    """
    if not industry:
        return None

    text = industry.strip().lower()
    for config in INDUSTRIES.values():
        if text in (config.key, config.name.lower()) or text in config.aliases:
            return config

    for config in INDUSTRIES.values():
        terms = [config.key, config.name.lower()] + config.aliases
        if any(term in text for term in terms if len(term) > 3):
            return config

    return None


def get_default_services(industry: Optional[str]) -> List[str]:
    config = resolve_industry(industry)
    return list(config.default_services) if config else []


def get_default_usps(industry: Optional[str]) -> List[str]:
    config = resolve_industry(industry)
    return list(config.default_usps) if config else []


def get_industry_directories(industry: Optional[str]) -> List[IndustryDirectory]:
    config = resolve_industry(industry)
    return list(config.directories) if config else []
