"""
Export catalog connection data for visualization.
"""
from collections import Counter, defaultdict
from typing import Dict, List, Optional, Set

from ..core.storage.models import Academic, normalize_name_key
from ..core.storage.store import PersistentStore


class GraphExporter:
    """Export the academic connection graph for web visualization."""

    # Color palette for disciplines
    DISCIPLINE_COLORS = {
        'Philosophy': '#4285f4',         # Blue
        'Sociology': '#ea4335',          # Red
        'Literary Theory': '#fbbc04',    # Yellow
        'Political Science': '#34a853',  # Green
        'History': '#ff6d01',            # Orange
        'Gender Studies': '#46bdc6',     # Teal
        'Anthropology': '#9c27b0',       # Purple
        'Psychology': '#607d8b',         # Gray
    }
    DEFAULT_COLOR = '#999999'

    def __init__(self, store: PersistentStore):
        self.store = store

    def _color(self, discipline: str) -> str:
        return self.DISCIPLINE_COLORS.get(discipline, self.DEFAULT_COLOR)

    def _resolve(self, connection: str) -> Optional[Academic]:
        """Record a connection name points at, by normalized key."""
        return self.store.academics.get(normalize_name_key(connection))

    def get_network_data(self) -> Dict[str, List[Dict]]:
        """Nodes grouped by first discipline, links for connections to known names."""
        academics = list(self.store.academics.values())
        names = {a.name for a in academics if a.name}

        nodes = [
            {'id': a.name, 'group': a.first_discipline() or 'Unknown'}
            for a in academics if a.name
        ]
        links = [
            {'source': a.name, 'target': connection, 'value': 1}
            for a in academics
            for connection in a.connections
            if connection in names
        ]
        return {'nodes': nodes, 'links': links}

    def _adjacency(self) -> Dict[str, Set[str]]:
        """Undirected key adjacency over resolvable connections."""
        adjacency = defaultdict(set)
        for key, academic in self.store.academics.items():
            for connection in academic.connections:
                target = self._resolve(connection)
                if target is not None and target.key != key:
                    adjacency[key].add(target.key)
                    adjacency[target.key].add(key)
        return adjacency

    def get_graph_data(
        self,
        disciplines: Optional[List[str]] = None,
        min_connections: int = 0,
        limit_nodes: int = 500
    ) -> Dict:
        """
        Export graph data in D3.js compatible format.

        Args:
            disciplines: Only include academics with one of these disciplines
            min_connections: Only include nodes with at least this many connections
            limit_nodes: Maximum number of nodes to include

        Returns:
            Dict with 'nodes', 'links' and 'stats' for D3.js
        """
        adjacency = self._adjacency()
        wanted = {d.lower() for d in disciplines} if disciplines else None

        candidates = []
        for key, academic in self.store.academics.items():
            if wanted is not None:
                own = {d.lower() for d in academic.taxonomies.get('discipline', [])}
                if not own & wanted:
                    continue
            connections = len(adjacency.get(key, ()))
            if connections >= min_connections:
                candidates.append((key, academic, connections))

        # Most connected first
        candidates.sort(key=lambda c: (-c[2], c[1].name.casefold()))
        candidates = candidates[:limit_nodes]

        nodes = []
        key_to_index = {}
        for i, (key, academic, connections) in enumerate(candidates):
            key_to_index[key] = i
            discipline = academic.first_discipline() or 'Unknown'
            nodes.append({
                'id': i,
                'key': key,
                'name': academic.name[:50],  # Truncate long names
                'full_name': academic.name,
                'discipline': discipline,
                'color': self._color(discipline),
                'connections': connections,
                'papers': len(academic.papers),
                'events': len(academic.events)
            })

        links = self._links_between(key_to_index, adjacency)

        return {
            'nodes': nodes,
            'links': links,
            'stats': {
                'total_nodes': len(nodes),
                'total_links': len(links),
                'disciplines': sorted(set(n['discipline'] for n in nodes))
            }
        }

    @staticmethod
    def _links_between(key_to_index: Dict[str, int], adjacency: Dict[str, Set[str]]) -> List[Dict]:
        """One undirected link per connected pair of included nodes."""
        seen = set()
        links = []
        for key, source_idx in key_to_index.items():
            for neighbor in sorted(adjacency.get(key, ())):
                target_idx = key_to_index.get(neighbor)
                if target_idx is None:
                    continue
                pair = (min(source_idx, target_idx), max(source_idx, target_idx))
                if pair not in seen:
                    seen.add(pair)
                    links.append({'source': pair[0], 'target': pair[1], 'value': 1})
        return links

    def get_academic_neighborhood(
        self,
        name: str,
        depth: int = 2,
        max_nodes: int = 100
    ) -> Dict:
        """
        Get neighborhood graph around a specific academic.

        Args:
            name: The central academic's name
            depth: How many hops to include
            max_nodes: Maximum nodes to include

        Returns:
            Dict with 'nodes' and 'links' for D3.js; empty when the name is unknown
        """
        center = self.store.academics.get(normalize_name_key(name))
        if center is None:
            return {'nodes': [], 'links': []}

        adjacency = self._adjacency()

        # BFS to find neighbors
        visited = [center.key]
        seen = {center.key}
        frontier = [center.key]

        for _ in range(depth):
            if len(visited) >= max_nodes:
                break

            new_frontier = []
            for key in frontier:
                for neighbor in sorted(adjacency.get(key, ())):
                    if neighbor not in seen and len(visited) < max_nodes:
                        seen.add(neighbor)
                        visited.append(neighbor)
                        new_frontier.append(neighbor)

            frontier = new_frontier
            if not frontier:
                break

        nodes = []
        key_to_index = {}
        for i, key in enumerate(visited):
            academic = self.store.academics[key]
            key_to_index[key] = i
            discipline = academic.first_discipline() or 'Unknown'
            nodes.append({
                'id': i,
                'key': key,
                'name': academic.name[:50],
                'full_name': academic.name,
                'discipline': discipline,
                'color': self._color(discipline),
                'is_center': key == center.key
            })

        return {'nodes': nodes, 'links': self._links_between(key_to_index, adjacency)}

    def get_stats(self) -> Dict:
        """Get catalog statistics."""
        academics = list(self.store.academics.values())
        network = self.get_network_data()

        dangling = 0
        for academic in academics:
            dangling += sum(1 for c in academic.connections if self._resolve(c) is None)

        discipline_counts = Counter(a.first_discipline() or 'Unknown' for a in academics)

        return {
            'academics': len(academics),
            'links': len(network['links']),
            'dangling_connections': dangling,
            'papers': sum(len(a.papers) for a in academics),
            'events': sum(len(a.events) for a in academics),
            'academics_by_discipline': dict(discipline_counts.most_common()),
            'novelty_tiles': len(self.store.novelty_tiles),
            'favorites': len(self.store.favorites),
            'pending_submissions': len(self.store.pending_submissions),
            'discipline_colors': self.DISCIPLINE_COLORS
        }
