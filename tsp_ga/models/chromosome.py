"""
Chromosome representation for TSP tours.
A chromosome is a permutation of city ids with a cached tour length.
"""

import random
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from tsp_ga.core.exceptions import InvalidChromosomeError, StaleFitnessError


@dataclass
class Chromosome:
    """One candidate tour, encoded as an ordered list of city ids."""
    genes: List[int] = field(default_factory=list)
    fitness_score: Optional[float] = None

    def add_gene(self, gene: int):
        """Append a city id in tour order."""
        self.genes.append(gene)
        self.fitness_score = None

    def get_size(self) -> int:
        return len(self.genes)

    def shuffle_genes(self, rng: random.Random, pinned_start: bool = True):
        """
        Uniformly permute the genes in place.

        Args:
            rng: Random source
            pinned_start: Keep the gene at position 0 where it is
        """
        offset = 1 if pinned_start else 0
        tail = self.genes[offset:]
        rng.shuffle(tail)
        self.genes[offset:] = tail
        self.fitness_score = None

    def calculate_fitness_score(self, distance_oracle) -> float:
        """
        Compute and cache the closed tour length.

        Args:
            distance_oracle: Object exposing ``get_distance(id_a, id_b)``

        Returns:
            Sum of consecutive edge distances plus the closing edge
        """
        genes = self.genes
        if len(genes) < 2:
            self.fitness_score = 0.0
            return self.fitness_score

        total = 0.0
        for i in range(len(genes) - 1):
            total += distance_oracle.get_distance(genes[i], genes[i + 1])
        total += distance_oracle.get_distance(genes[-1], genes[0])

        self.fitness_score = float(total)
        return self.fitness_score

    @property
    def fitness(self) -> float:
        """Cached tour length; lower is better."""
        if self.fitness_score is None:
            raise StaleFitnessError(self.genes)
        return self.fitness_score

    def has_fitness(self) -> bool:
        return self.fitness_score is not None

    def invalidate_fitness(self):
        self.fitness_score = None

    def is_valid(self, expected_genes: Optional[Iterable[int]] = None) -> bool:
        """
        Check the permutation invariant.

        Args:
            expected_genes: Identifier set the tour must cover exactly once.
                Defaults to the contiguous range ``1..len(genes)``.
        """
        return self._find_violation(expected_genes) is None

    def validate(self, expected_genes: Optional[Iterable[int]] = None):
        """Raise InvalidChromosomeError when the permutation invariant is broken."""
        reason = self._find_violation(expected_genes)
        if reason is not None:
            raise InvalidChromosomeError(self.genes, reason)

    def _find_violation(self, expected_genes: Optional[Iterable[int]]) -> Optional[str]:
        if expected_genes is None:
            expected = set(range(1, len(self.genes) + 1))
        else:
            expected = set(expected_genes)

        if len(self.genes) != len(expected):
            return f"expected {len(expected)} genes, got {len(self.genes)}"

        seen = set()
        for gene in self.genes:
            if gene in seen:
                return f"duplicate gene {gene}"
            seen.add(gene)

        if seen != expected:
            missing = sorted(expected - seen)
            return f"missing genes {missing[:10]}"

        return None

    def copy(self) -> 'Chromosome':
        """Create an independent copy."""
        return Chromosome(genes=self.genes.copy(), fitness_score=self.fitness_score)

    def to_dict(self) -> Dict:
        return {
            'genes': list(self.genes),
            'fitness': float(self.fitness_score) if self.fitness_score is not None else None,
            'size': self.get_size(),
        }

    def __str__(self):
        return " -> ".join(str(gene) for gene in self.genes)
