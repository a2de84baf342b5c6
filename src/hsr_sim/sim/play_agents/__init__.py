"""Action-choosing agents for automated battles."""

from hsr_sim.sim.play_agents.base import PlayAgent
from hsr_sim.sim.play_agents.greedy_agent import GreedyAgent
from hsr_sim.sim.play_agents.random_agent import RandomAgent

AGENTS: dict[str, type[PlayAgent]] = {
    "greedy": GreedyAgent,
    "random": RandomAgent,
}

__all__ = ["AGENTS", "PlayAgent", "GreedyAgent", "RandomAgent"]
