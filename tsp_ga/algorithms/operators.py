"""
Genetic Algorithm operators for TSP.
Implements selection, permutation-preserving crossover, and inversion mutation.
"""

import math
import random
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from tsp_ga.models.chromosome import Chromosome


class SelectionOperator:
    """Selection operators for GA."""

    @staticmethod
    def truncate(chromosomes: List[Chromosome],
                 best_pct: float) -> Tuple[List[Chromosome], List[Chromosome]]:
        """
        Sort ascending by fitness and split off the best fraction.

        Args:
            chromosomes: Evaluated chromosomes
            best_pct: Fraction kept deterministically

        Returns:
            Tuple of (best, rest); both keep the sorted order
        """
        ranked = sorted(chromosomes, key=lambda c: c.fitness)
        best_count = int(len(ranked) * best_pct)
        return ranked[:best_count], ranked[best_count:]

    @staticmethod
    def random_cull(chromosomes: List[Chromosome], keep_pct: float,
                    rng: random.Random) -> List[Chromosome]:
        """
        Shuffle and keep only a fraction of the chromosomes.

        Args:
            chromosomes: Candidates outside the best fraction
            keep_pct: Fraction to keep
            rng: Random source

        Returns:
            Randomly chosen survivors
        """
        survivors = list(chromosomes)
        rng.shuffle(survivors)
        keep_count = int(len(survivors) * keep_pct)
        return survivors[:keep_count]


class CrossoverOperator:
    """Crossover operators for permutation-encoded tours."""

    @staticmethod
    def random_cut_points(n: int, rng: random.Random) -> Tuple[int, int]:
        """Draw an inclusive segment ``0 <= start < end <= n - 1``."""
        start = rng.randint(0, n - 2)
        end = rng.randint(start + 1, n - 1)
        return start, end

    @staticmethod
    def _check_parents(parent1: Chromosome, parent2: Chromosome):
        if parent1.get_size() != parent2.get_size():
            raise ValueError("Parents must have same chromosome length")

    @staticmethod
    def partially_mapped_crossover(parent1: Chromosome, parent2: Chromosome,
                                   rng: random.Random) -> Tuple[Chromosome, Chromosome]:
        """
        Partially Mapped Crossover (PMX) operator.

        Args:
            parent1: First parent
            parent2: Second parent
            rng: Random source for the cut points

        Returns:
            Tuple of two offspring
        """
        CrossoverOperator._check_parents(parent1, parent2)
        n = parent1.get_size()
        if n < 2:
            return parent1.copy(), parent2.copy()

        start, end = CrossoverOperator.random_cut_points(n, rng)
        child1 = Chromosome(CrossoverOperator.pmx_child(parent1.genes, parent2.genes, start, end))
        child2 = Chromosome(CrossoverOperator.pmx_child(parent2.genes, parent1.genes, start, end))
        return child1, child2

    @staticmethod
    def pmx_child(donor: Sequence[int], other: Sequence[int],
                  start: int, end: int) -> List[int]:
        """
        Build one PMX child.

        The segment ``donor[start:end + 1]`` is copied verbatim. Every other
        position takes ``other[i]``; while that gene already sits in the
        segment it is replaced through the segment mapping
        ``gene -> other[position of gene in donor]``.
        """
        n = len(donor)
        child = list(other)
        child[start:end + 1] = donor[start:end + 1]

        segment = set(donor[start:end + 1])
        donor_index = {gene: i for i, gene in enumerate(donor)}

        for i in list(range(0, start)) + list(range(end + 1, n)):
            gene = other[i]
            while gene in segment:
                gene = other[donor_index[gene]]
            child[i] = gene

        return child

    @staticmethod
    def order_crossover(parent1: Chromosome, parent2: Chromosome,
                        rng: random.Random) -> Tuple[Chromosome, Chromosome]:
        """
        Order Crossover (OX) operator.

        Args:
            parent1: First parent
            parent2: Second parent
            rng: Random source for the cut points

        Returns:
            Tuple of two offspring
        """
        CrossoverOperator._check_parents(parent1, parent2)
        n = parent1.get_size()
        if n < 2:
            return parent1.copy(), parent2.copy()

        start, end = CrossoverOperator.random_cut_points(n, rng)
        child1 = Chromosome(CrossoverOperator.ox_child(parent1.genes, parent2.genes, start, end))
        child2 = Chromosome(CrossoverOperator.ox_child(parent2.genes, parent1.genes, start, end))
        return child1, child2

    @staticmethod
    def ox_child(donor: Sequence[int], other: Sequence[int],
                 start: int, end: int) -> List[int]:
        """
        Build one OX child.

        The segment is copied from ``donor``; remaining positions are filled
        left to right with the genes of ``other`` in its order, skipping genes
        already placed. Filling from position 0 keeps a shared pinned start.
        """
        n = len(donor)
        child: List[Optional[int]] = [None] * n
        child[start:end + 1] = donor[start:end + 1]

        placed = set(donor[start:end + 1])
        remaining = iter(gene for gene in other if gene not in placed)

        for i in range(n):
            if child[i] is None:
                child[i] = next(remaining)

        return child

    @staticmethod
    def cycle_crossover(parent1: Chromosome, parent2: Chromosome,
                        rng: Optional[random.Random] = None) -> Tuple[Chromosome, Chromosome]:
        """
        Cycle Crossover (CX) operator.

        CX draws no random numbers; ``rng`` is accepted so all operators share
        one call signature.
        """
        CrossoverOperator._check_parents(parent1, parent2)
        if parent1.get_size() < 2:
            return parent1.copy(), parent2.copy()

        genes1, genes2 = CrossoverOperator.cx_children(parent1.genes, parent2.genes)
        return Chromosome(genes1), Chromosome(genes2)

    @staticmethod
    def cx_children(parent1: Sequence[int], parent2: Sequence[int]) -> Tuple[List[int], List[int]]:
        """
        Trace one cycle and swap everything outside it.

        The cycle starts at the first position where the parents differ, so
        a shared pinned start gene does not collapse the cycle to position 0.
        Identical parents come back as copies.
        """
        start = next((i for i, (g1, g2) in enumerate(zip(parent1, parent2)) if g1 != g2), None)
        if start is None:
            return list(parent1), list(parent2)

        index_in_parent1 = {gene: i for i, gene in enumerate(parent1)}

        cycle = set()
        pos = start
        while pos not in cycle:
            cycle.add(pos)
            pos = index_in_parent1[parent2[pos]]

        child1 = [parent1[i] if i in cycle else parent2[i] for i in range(len(parent1))]
        child2 = [parent2[i] if i in cycle else parent1[i] for i in range(len(parent1))]
        return child1, child2

    @staticmethod
    def get(name: str) -> Callable[[Chromosome, Chromosome, random.Random],
                                   Tuple[Chromosome, Chromosome]]:
        """Look up a crossover operator by its short name (pmx, ox, cx)."""
        operators: Dict[str, Callable] = {
            'pmx': CrossoverOperator.partially_mapped_crossover,
            'ox': CrossoverOperator.order_crossover,
            'cx': CrossoverOperator.cycle_crossover,
        }
        try:
            return operators[name.lower()]
        except KeyError:
            raise ValueError(f"Unknown crossover operator: {name}") from None


class MutationOperator:
    """Mutation operators for TSP."""

    @staticmethod
    def inversion_mutation(chromosome: Chromosome, rng: random.Random,
                           mutation_rate: Optional[float] = None,
                           pinned_start: bool = True) -> Tuple[int, int]:
        """
        Inversion mutation operator, applied in place.

        Args:
            chromosome: Chromosome to mutate
            rng: Random source
            mutation_rate: When given, bounds the segment length to
                ``max(2, ceil(rate * movable_length))`` genes
            pinned_start: Never move the gene at position 0

        Returns:
            The inverted position pair ``(i, j)``, or ``(-1, -1)`` if the tour
            is too short to mutate
        """
        n = chromosome.get_size()
        offset = 1 if pinned_start else 0
        movable = n - offset
        if movable < 2:
            return -1, -1

        if mutation_rate is None:
            i = rng.randint(offset, n - 2)
            j = rng.randint(i + 1, n - 1)
        else:
            max_span = min(movable, max(2, math.ceil(mutation_rate * movable)))
            span = rng.randint(2, max_span)
            i = rng.randint(offset, n - span)
            j = i + span - 1

        MutationOperator.invert_segment(chromosome, i, j)
        return i, j

    @staticmethod
    def invert_segment(chromosome: Chromosome, i: int, j: int):
        """Reverse ``genes[i:j + 1]`` in place and mark the fitness stale."""
        if not 0 <= i < j < chromosome.get_size():
            raise ValueError(f"Invalid inversion positions ({i}, {j})")
        genes = chromosome.genes
        genes[i:j + 1] = genes[i:j + 1][::-1]
        chromosome.invalidate_fitness()
