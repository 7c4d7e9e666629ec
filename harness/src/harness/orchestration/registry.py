from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from harness.configuration import HarnessConfig
from harness.contracts.scene import SceneWiring

SceneProviderFactory = Callable[[HarnessConfig], SceneWiring]


class SceneProviderNotFoundError(KeyError):
    pass


@dataclass
class DictSceneProviderRegistry:
    providers: dict[str, SceneProviderFactory]

    def get(self, provider_key: str) -> SceneProviderFactory:
        try:
            return self.providers[provider_key]
        except KeyError as e:
            raise SceneProviderNotFoundError(provider_key) from e

    def list(self) -> Iterable[str]:
        return sorted(self.providers)

    def build(self, config: HarnessConfig) -> SceneWiring:
        return self.get(config.scene.provider)(config)
