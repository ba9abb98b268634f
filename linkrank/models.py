"""Database models for the linkrank app.

A corpus is imported from a directory holding a registry of document ids
and URLs plus a link edge list. The registry and the exported PageRank
scores are stored so searches can be re-ranked without recomputing
authority on every request.
"""

from __future__ import annotations

from django.db import models


class Corpus(models.Model):
    """A named corpus snapshot and the parameters used to score it."""

    name = models.CharField(max_length=100, unique=True)
    directory = models.CharField(max_length=500)
    damping_factor = models.FloatField(default=0.85)
    iterations = models.PositiveIntegerField(default=10)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:  # pragma: no cover - convenience display
        return self.name


class CorpusDocument(models.Model):
    """Registry entry mapping a document id to its URL."""

    corpus = models.ForeignKey(Corpus, on_delete=models.CASCADE, related_name='documents')
    doc_id = models.PositiveIntegerField(db_index=True)
    url = models.CharField(max_length=2000)

    class Meta:
        unique_together = ('corpus', 'doc_id')

    def __str__(self) -> str:  # pragma: no cover - convenience display
        return f"{self.doc_id} {self.url}"


class AuthorityScore(models.Model):
    """Exported PageRank score for one document of a corpus."""

    corpus = models.ForeignKey(Corpus, on_delete=models.CASCADE, related_name='scores')
    doc_id = models.PositiveIntegerField(db_index=True)
    score = models.FloatField()
    position = models.PositiveIntegerField()

    class Meta:
        unique_together = ('corpus', 'doc_id')
        ordering = ['position']

    def __str__(self) -> str:  # pragma: no cover - convenience display
        return f"{self.doc_id}: {self.score:.6f}"
