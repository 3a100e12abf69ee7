"""Lua scripts for conditional link mutations.

Each script checks that the link record still exists (and, where an id is
given, that it is the same record) before touching it, so a mutation racing
with a delete never recreates a partial record.
"""

# KEYS[1] = link hash
# ARGV[1] = expected link id, or '' to accept any record under the slug
# Returns the new click count, or nil when the link doesn't exist or was replaced.
HIT_LINK = """
local id = redis.call('HGET', KEYS[1], 'id')
if not id or (ARGV[1] ~= '' and id ~= ARGV[1]) then
    return nil
end
return redis.call('HINCRBY', KEYS[1], 'clicks', 1)
"""

# KEYS[1] = link hash
# ARGV[1] = link id, ARGV[2] = ISO-8601 expiry or '' to clear it
# Returns 1 when the expiry was written, 0 otherwise.
UPDATE_EXPIRY = """
if redis.call('HGET', KEYS[1], 'id') ~= ARGV[1] then
    return 0
end
if ARGV[2] == '' then
    redis.call('HDEL', KEYS[1], 'expires_at')
else
    redis.call('HSET', KEYS[1], 'expires_at', ARGV[2])
end
return 1
"""

# KEYS[1] = id index hash, KEYS[2] = creation index, KEYS[3] = link hash
# ARGV[1] = link id, ARGV[2] = slug
DELETE_LINK = """
if redis.call('HGET', KEYS[3], 'id') == ARGV[1] then
    redis.call('DEL', KEYS[3])
    redis.call('ZREM', KEYS[2], ARGV[2])
end
redis.call('HDEL', KEYS[1], ARGV[1])
return 1
"""
