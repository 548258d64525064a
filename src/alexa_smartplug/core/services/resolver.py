"""Entity id -> appliance id resolution over the topology snapshot."""

from __future__ import annotations

import logging

from alexa_smartplug.adapters.topology_cache import TopologyCache
from alexa_smartplug.core.domain.models import DEFAULT_LOCATION, SMARTHOME_BRIDGE
from alexa_smartplug.core.errors import UnknownStateError

logger = logging.getLogger(__name__)


class EntityResolver:
    """Translate the public entity id of a device into its internal appliance id.

    The state endpoint only accepts the appliance id, which is reported
    nowhere but in the network detail under
    `Default_Location -> LambdaBridge_AAA/SonarCloudService -> applianceDetails`.
    """

    def __init__(
        self,
        cache: TopologyCache,
        *,
        location: str = DEFAULT_LOCATION,
        bridge: str = SMARTHOME_BRIDGE,
    ) -> None:
        self._cache = cache
        self._location = location
        self._bridge = bridge

    async def resolve_appliance_id(self, entity_id: str, force: bool = False) -> str | None:
        """Return the appliance id, or None when no appliance carries `entity_id`.

        Raises `UnknownStateError` when the snapshot lacks the appliance
        collection, which usually means a bad cookie or account setup.
        """

        topology = await self._cache.get_topology(force)
        appliances = topology.appliance_details(self._location, self._bridge)
        if appliances is None:
            raise UnknownStateError()

        for appliance in appliances.values():
            if appliance.entity_id == entity_id:
                return appliance.appliance_id

        logger.debug("entity %s not present in topology", entity_id)
        return None
