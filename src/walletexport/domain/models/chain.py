from pydantic import BaseModel, ConfigDict

from walletexport.domain.enums import Chain


class ChainProfile(BaseModel):
    """Native-asset facts used when a provider gives no explicit token metadata."""

    model_config = ConfigDict(frozen=True)

    chain: Chain
    native_symbol: str
    native_decimals: int
    native_denoms: frozenset[str] = frozenset()

    def is_native(self, denom: str) -> bool:
        return denom in self.native_denoms or denom.upper() == self.native_symbol


CHAIN_PROFILES: dict[Chain, ChainProfile] = {
    Chain.OSMOSIS: ChainProfile(
        chain=Chain.OSMOSIS, native_symbol="OSMO", native_decimals=6, native_denoms=frozenset({"uosmo"}),
    ),
    Chain.CELESTIA: ChainProfile(
        chain=Chain.CELESTIA, native_symbol="TIA", native_decimals=6, native_denoms=frozenset({"utia"}),
    ),
    Chain.CELO: ChainProfile(
        chain=Chain.CELO, native_symbol="CELO", native_decimals=18, native_denoms=frozenset({"wei", "native"}),
    ),
    Chain.RONIN: ChainProfile(
        chain=Chain.RONIN, native_symbol="RON", native_decimals=18, native_denoms=frozenset({"wei", "native"}),
    ),
    Chain.TEZOS: ChainProfile(
        chain=Chain.TEZOS, native_symbol="XTZ", native_decimals=6, native_denoms=frozenset({"microtez", "mutez"}),
    ),
    Chain.NEAR: ChainProfile(
        chain=Chain.NEAR, native_symbol="NEAR", native_decimals=24, native_denoms=frozenset({"near", "yoctonear"}),
    ),
    Chain.FANTOM: ChainProfile(
        chain=Chain.FANTOM, native_symbol="FTM", native_decimals=18, native_denoms=frozenset({"wei", "native"}),
    ),
}
