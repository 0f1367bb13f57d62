from seqpipe.collections.vec import Vec
from seqpipe.collections.hashmap import HashMap
from seqpipe.collections.hashset import HashSet
