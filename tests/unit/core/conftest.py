"""Shared fixtures for core unit tests"""

import pytest

from mdsite.core.parse import load_text


FUNCTORS_MD = """\
---
layout: post
title: Functors
comments: true
---

# Functors

A *functor* is a type constructor with an `fmap`. See [the wiki](https://wiki.haskell.org/Functor).

```haskell
class Functor f where
  fmap :: (a -> b) -> f a -> f b

instance Functor Maybe where
  fmap _ Nothing  = Nothing
  fmap f (Just a) = Just (f a)
```

In Java the closest thing is a `map` on `Optional<T>`:

```java
Optional<Integer> n = Optional.of(1).map(x -> x + 1);
if (a < b && b > c) { return "<&>"; }
```
"""

PLAIN_MD = """\
# No front-matter

Just a body.
"""


@pytest.fixture(name="functors_doc")
def functors_doc_fixture(tmp_path):
    return load_text(tmp_path / "2014-03-07-functors.md", FUNCTORS_MD)


@pytest.fixture(name="plain_doc")
def plain_doc_fixture(tmp_path):
    return load_text(tmp_path / "type-classes.md", PLAIN_MD)
