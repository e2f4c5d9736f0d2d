from enum import Enum


class Chain(str, Enum):
    """Supported networks. Values lowercase to match URL slugs and filenames."""

    OSMOSIS = "osmosis"
    CELESTIA = "celestia"
    CELO = "celo"
    RONIN = "ronin"
    TEZOS = "tezos"
    NEAR = "near"
    FANTOM = "fantom"
