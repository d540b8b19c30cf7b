"""Host resource checks: basic info, CPU, memory, disks and load average."""