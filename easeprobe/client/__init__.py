"""Client probes for MySQL, Redis, Memcache and MongoDB servers."""