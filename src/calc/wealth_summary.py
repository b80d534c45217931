from typing import Dict


def wealth_summary(wealth: Dict, profile: Dict) -> Dict:
    """Net worth, liquidity and per-person net worth of a household.

    Args:
        wealth: Mapping with 'investments', 'property', 'cash' and 'liabilities'
        profile: Mapping with 'maritalStatus' and 'members'; per-person net
                 worth divides by members for married households only

    Returns:
        Dictionary with net_worth, assets, liabilities, liquidity and
        per_person_net_worth (None unless married)
    """
    assets = wealth.get('investments', 0) + wealth.get('property', 0) + wealth.get('cash', 0)
    liabilities = wealth.get('liabilities', 0)
    net_worth = assets - liabilities

    married = profile.get('maritalStatus') == 'married'
    members = profile.get('members', 2)
    if married and members <= 0:
        raise ValueError(f"A married household needs at least one member, got {members}")

    return {
        'net_worth': net_worth,
        'assets': assets,
        'liabilities': liabilities,
        'liquidity': wealth.get('cash', 0),
        'per_person_net_worth': net_worth / members if married else None,
    }
