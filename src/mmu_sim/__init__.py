"""MMU simulator — two-level paging with first-fit frame allocation.

A process asks the memory manager for memory, then touches a logical
address.  The first touch is a page fault: the manager finds a run of
free physical frames, marks them (and the matching virtual pages) as
owned, and records the mapping in the process's hierarchical page
table.  Terminating the process reverses all three.
"""
