# src/lab_planner/distribution.py
"""
Push a finished MachineConfig to the lab agents listed in its network section.

Each agent is offered to the registered pushers in order; the first pusher
that reports success wins. A pusher that raises is logged and counted as a
failure for that agent only, so one bad transport never aborts the whole
distribution. Failed agents are reported, not retried.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

import requests

from .config_models import AgentAddress, MachineConfig, machine_config_to_dict

logger = logging.getLogger(__name__)


AgentFilter = Callable[[AgentAddress], bool]


class ConfigPusher:
    """Transport that can deliver a MachineConfig to one agent."""

    #: lower-case protocol names this pusher is responsible for
    protocols: tuple[str, ...] = ()

    def handles(self, agent: AgentAddress) -> bool:
        return (agent.protocol or "").lower() in self.protocols

    def push(self, agent: AgentAddress, config: MachineConfig) -> bool:
        """Return True if the agent accepted the config."""
        raise NotImplementedError


class HttpAgentClient(ConfigPusher):
    """
    POST the config as JSON to ``agent.endpoint``.

    Agents with an API key get it in an ``X-API-Key`` header. Any 2xx
    response counts as accepted.
    """

    protocols = ("http", "https")

    def __init__(self, session: Optional[requests.Session] = None, timeout: float = 10.0) -> None:
        # only a session created here is ours to close
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.timeout = timeout

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "HttpAgentClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def push(self, agent: AgentAddress, config: MachineConfig) -> bool:
        if not self.handles(agent):
            return False

        headers = {"Content-Type": "application/json"}
        if agent.api_key and agent.api_key.strip():
            headers["X-API-Key"] = agent.api_key

        response = self.session.post(
            agent.endpoint,
            data=json.dumps(machine_config_to_dict(config)),
            headers=headers,
            timeout=self.timeout,
        )
        if not 200 <= response.status_code < 300:
            logger.info(
                "Agent '%s' rejected config: HTTP %d", agent.id, response.status_code
            )
            return False
        return True


class FileDropAgentClient(ConfigPusher):
    """
    Write the config to ``<root>/<endpoint>/<agent id>.json`` for agents that
    pick up configuration from a shared directory.

    The target must resolve inside ``root``; an absolute endpoint or a ``..``
    in the endpoint or agent id that escapes it is refused.
    """

    protocols = ("file",)

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def push(self, agent: AgentAddress, config: MachineConfig) -> bool:
        if not self.handles(agent):
            return False
        root = self.root.resolve()
        path = (root / (agent.endpoint or "") / f"{agent.id}.json").resolve()
        if root not in path.parents:
            logger.warning(
                "Refusing to write config for agent '%s' outside %s: %s",
                agent.id,
                root,
                path,
            )
            return False
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(machine_config_to_dict(config), indent=2))
        logger.debug("Wrote config for agent '%s' to %s", agent.id, path)
        return True


class ConfigDistributor:
    def __init__(self, pushers: Iterable[ConfigPusher]) -> None:
        self.pushers: List[ConfigPusher] = list(pushers)

    def distribute(
        self,
        config: MachineConfig,
        agent_filter: Optional[AgentFilter] = None,
    ) -> Dict[str, bool]:
        """
        Push `config` to every agent (or those accepted by `agent_filter`).

        Returns {agent id: delivered?}.
        """
        results: Dict[str, bool] = {}
        for agent in config.network.agents:
            if agent_filter is not None and not agent_filter(agent):
                continue
            pushed = False
            for pusher in self.pushers:
                if self._try_push(pusher, agent, config):
                    pushed = True
                    break
            if pushed:
                logger.info("Config '%s' delivered to agent '%s'", config.identity.name, agent.id)
            else:
                logger.warning(
                    "Config '%s' could not be delivered to agent '%s' (%s %s)",
                    config.identity.name,
                    agent.id,
                    agent.protocol,
                    agent.endpoint,
                )
            results[agent.id] = pushed
        return results

    @staticmethod
    def _try_push(pusher: ConfigPusher, agent: AgentAddress, config: MachineConfig) -> bool:
        try:
            return bool(pusher.push(agent, config))
        except Exception as exc:
            logger.warning(
                "%s failed for agent '%s': %s", type(pusher).__name__, agent.id, exc
            )
            return False
